from models.booking import Booking
from models.court import Court
from models.rating import Rating
from services.errors import ForbiddenError, NotFoundError, ValidationError


class RatingService:
    def __init__(self, store, require_confirmed_booking=True, min_score=1, max_score=5):
        self.store = store
        self.require_confirmed_booking = require_confirmed_booking
        self.min_score = min_score
        self.max_score = max_score

    def _score(self, value):
        if isinstance(value, bool):
            raise ValidationError("rating must be a whole number", field="rating")
        try:
            score = int(value)
        except (TypeError, ValueError):
            raise ValidationError("rating must be a whole number", field="rating")
        if score != value and str(score) != str(value).strip():
            raise ValidationError("rating must be a whole number", field="rating")
        if not self.min_score <= score <= self.max_score:
            raise ValidationError(f"rating must be between {self.min_score} and {self.max_score}", field="rating")
        return score

    def submit(self, actor, court_id, rating, comment=None):
        if court_id in (None, ""):
            raise ValidationError("Missing field: courtId", field="courtId")
        if rating in (None, ""):
            raise ValidationError("Missing field: rating", field="rating")
        try:
            court = self.store.get(Court, int(court_id))
        except (TypeError, ValueError):
            court = None
        if not court:
            raise ValidationError("courtId does not reference a court", field="courtId")
        score = self._score(rating)

        if self.require_confirmed_booking:
            played = self.store.find_one(Booking, user_email=actor.email, court_id=court.id, status="confirmed")
            if not played:
                raise ForbiddenError("Only players with a confirmed booking can rate this court")

        row = Rating(court_id=court.id, user_email=actor.email, rating=score, comment=(comment or None))
        self.store.add(row)
        self.store.commit()
        return row

    def list(self, court_id=None, email=None):
        q = self.store.query(Rating)
        if court_id:
            q = q.filter(Rating.court_id == court_id)
        if email:
            q = q.filter(Rating.user_email == email.strip().lower())
        return q.order_by(Rating.created_at.desc(), Rating.id.desc()).all()

    def _owned(self, actor, rating_id):
        row = self.store.get(Rating, rating_id)
        if not row:
            raise NotFoundError("Rating not found")
        if row.user_email != actor.email:
            raise ForbiddenError("Only the author can change this rating")
        return row

    def update(self, actor, rating_id, data):
        row = self._owned(actor, rating_id)
        if "rating" in data:
            row.rating = self._score(data.get("rating"))
        if "comment" in data:
            row.comment = data.get("comment") or None
        self.store.commit()
        return row

    def delete(self, actor, rating_id):
        row = self._owned(actor, rating_id)
        self.store.delete(row)
        self.store.commit()
