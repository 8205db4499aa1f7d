import logging

from models.booking import Booking
from models.court import Court
from models.rating import Rating
from services.errors import ConflictError, NotFoundError, ValidationError
from services.gateway import positive_amount

logger = logging.getLogger(__name__)

# bookings that still hold a claim on the court or a payment against it
ACTIVE_BOOKING_STATUSES = ("pending", "approved", "confirmed")


def _text(value):
    return str(value or "").strip()


def _parse_court_slots(value):
    slots = value or []
    if not isinstance(slots, list) or not all(isinstance(s, str) and s.strip() for s in slots):
        raise ValidationError("slots must be a list of slot labels", field="slots")
    return [s.strip() for s in slots]


class CourtService:
    """Facility catalogue. Only administrators reach the write operations."""

    def __init__(self, store):
        self.store = store

    def create(self, data):
        name = _text(data.get("name"))
        court_type = _text(data.get("type"))
        if not name:
            raise ValidationError("Missing field: name", field="name")
        if not court_type:
            raise ValidationError("Missing field: type", field="type")

        court = Court(
            name=name,
            type=court_type,
            image=_text(data.get("image")) or None,
            location=_text(data.get("location")) or None,
            price_per_session=float(positive_amount(data.get("pricePerSession"), field="pricePerSession")),
            slots=_parse_court_slots(data.get("slots")),
        )
        self.store.add(court)
        self.store.commit()
        return court

    def list(self, court_type=None):
        q = self.store.query(Court)
        if court_type:
            q = q.filter(Court.type == court_type)
        return q.order_by(Court.created_at.desc(), Court.id.desc()).all()

    def count(self):
        return self.store.count(Court)

    def get(self, court_id):
        court = self.store.get(Court, court_id)
        if not court:
            raise NotFoundError("Court not found")
        return court

    def update(self, court_id, data):
        """Partial update; only keys present in ``data`` are touched."""
        court = self.get(court_id)

        if "name" in data:
            name = _text(data.get("name"))
            if not name:
                raise ValidationError("name cannot be empty", field="name")
            court.name = name
        if "type" in data:
            court_type = _text(data.get("type"))
            if not court_type:
                raise ValidationError("type cannot be empty", field="type")
            court.type = court_type
        if "image" in data:
            court.image = _text(data.get("image")) or None
        if "location" in data:
            court.location = _text(data.get("location")) or None
        if "pricePerSession" in data:
            court.price_per_session = float(positive_amount(data.get("pricePerSession"), field="pricePerSession"))
        if "slots" in data:
            court.slots = _parse_court_slots(data.get("slots"))

        self.store.commit()
        return court

    def delete(self, court_id):
        """
        Remove a court together with its ratings and rejected bookings.

        Refused while any pending, approved or confirmed booking references
        the court; those have to be rejected (or deleted) first.
        """
        court = self.get(court_id)

        active = (
            self.store.query(Booking)
            .filter(Booking.court_id == court.id, Booking.status.in_(ACTIVE_BOOKING_STATUSES))
            .count()
        )
        if active:
            raise ConflictError(
                "Court has active bookings",
                field="id",
                details={"activeBookings": active},
            )

        ratings = self.store.query(Rating).filter(Rating.court_id == court.id).all()
        bookings = self.store.query(Booking).filter(Booking.court_id == court.id).all()
        with self.store.atomic():
            for row in ratings + bookings:
                self.store.delete(row)
            self.store.flush()
            self.store.delete(court)

        logger.info("Court %s deleted with %d ratings and %d bookings", court_id, len(ratings), len(bookings))
        return {"deleted": 1, "ratings": len(ratings), "bookings": len(bookings)}
