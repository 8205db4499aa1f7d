from sqlalchemy import func

from models.court import Court
from models.rating import Rating
from services.errors import ValidationError

DEFAULT_LIMIT = 6


class PopularityService:
    """Ranks courts by their ratings. Read-only."""

    def __init__(self, store, default_limit=DEFAULT_LIMIT, max_limit=50):
        self.store = store
        self.default_limit = default_limit
        self.max_limit = max_limit

    def rank_facilities(self, limit=None):
        if limit is None:
            limit = self.default_limit
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise ValidationError("limit must be a positive integer", field="limit")
        limit = min(limit, self.max_limit)

        grouped = (
            self.store.query(
                Rating.court_id.label("court_id"),
                func.avg(Rating.rating).label("average_rating"),
                func.count(Rating.id).label("total_ratings"),
                # earliest rating id keeps ties in insertion order
                func.min(Rating.id).label("first_rating_id"),
            )
            .group_by(Rating.court_id)
            .subquery()
        )

        rows = (
            self.store.query(Court, grouped.c.average_rating, grouped.c.total_ratings)
            .join(grouped, grouped.c.court_id == Court.id)
            .order_by(
                grouped.c.average_rating.desc(),
                grouped.c.total_ratings.desc(),
                grouped.c.first_rating_id.asc(),
            )
            .limit(limit)
            .all()
        )

        return [
            {
                "id": court.id,
                "name": court.name,
                "type": court.type,
                "image": court.image,
                "location": court.location,
                "price_per_session": court.price_per_session,
                "average_rating": float(average),
                "total_ratings": int(total),
            }
            for court, average, total in rows
        ]
