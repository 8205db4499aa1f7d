"""
Booking lifecycle: creation, status transitions, deletion and listing.

    pending --approve--> approved --pay--> confirmed
       |                    |
       +------reject--------+----> rejected

Approving a booking promotes its requester to ``member``. Active bookings
hold (court, date, slot) claims so two of them can never share a slot.
"""
import logging
from datetime import date as date_cls

from models.booking import Booking, BookingSlot, BOOKING_STATUSES
from models.court import Court
from services.errors import (
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    PartialFailureError,
    ServiceError,
    ValidationError,
)
from services.gateway import positive_amount
from services.membership import MembershipService

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("userEmail", "courtId", "courtTitle", "courtType", "date", "slots", "price")

# approved -> approved re-runs the membership promotion only
TRANSITIONS = {
    "pending": {"approved", "rejected"},
    "approved": {"approved", "confirmed", "rejected"},
    "rejected": set(),
    "confirmed": set(),
}


def can_transition(current, target):
    return target in TRANSITIONS.get(current, set())


def _is_admin(actor):
    return actor is not None and getattr(actor, "role", None) == "admin"


def _parse_id(value, field):
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field}", field=field)


def _parse_positive(value, field, default):
    if value in (None, ""):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field}", field=field)
    if number < 1:
        raise ValidationError(f"{field} must be at least 1", field=field)
    return number


def _parse_date(value):
    if isinstance(value, date_cls):
        return value
    try:
        return date_cls.fromisoformat(str(value)[:10])
    except ValueError:
        raise ValidationError("Invalid date. Use YYYY-MM-DD", field="date")


def _parse_slots(value):
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        raise ValidationError("slots must be a list of slot labels", field="slots")

    labels = []
    for item in value:
        if not isinstance(item, str) or not item.strip():
            raise ValidationError("slots must be a list of slot labels", field="slots")
        label = item.strip()
        if label not in labels:
            labels.append(label)
    if not labels:
        raise ValidationError("Missing field: slots", field="slots")
    return labels


class BookingService:
    def __init__(self, store, membership=None):
        self.store = store
        self.membership = membership or MembershipService(store)

    # ---------- create ----------
    def create(self, actor, data):
        missing = next((f for f in REQUIRED_FIELDS if data.get(f) in (None, "", [])), None)
        if missing:
            raise ValidationError(f"Missing field: {missing}", field=missing)

        requester = str(data["userEmail"]).strip().lower()
        if actor is not None and not _is_admin(actor) and requester != actor.email:
            raise ForbiddenError("Cannot book on behalf of another user")

        court_id = _parse_id(data["courtId"], "courtId")
        court_title = str(data["courtTitle"]).strip()
        court_type = str(data["courtType"]).strip()
        if not court_title:
            raise ValidationError("Missing field: courtTitle", field="courtTitle")
        if not court_type:
            raise ValidationError("Missing field: courtType", field="courtType")

        day = _parse_date(data["date"])
        labels = _parse_slots(data["slots"])
        price = positive_amount(data["price"], field="price")

        if not self.store.get(Court, court_id):
            raise ValidationError("courtId does not reference a court", field="courtId")

        coupon_code = (data.get("couponCode") or "").strip() or None

        booking = Booking(
            user_email=requester,
            court_id=court_id,
            court_title=court_title,
            court_type=court_type,
            date=day,
            slot_labels=labels,
            price=float(price),
            coupon_code=coupon_code,
            status="pending",
        )
        booking.claims = [BookingSlot(court_id=court_id, date=day, label=label) for label in labels]

        with self.store.atomic(conflict_message="One or more slots are already booked"):
            self.store.add(booking)

        logger.info("Booking %s created for %s", booking.id, requester)
        return booking

    # ---------- read ----------
    def get(self, booking_id, actor=None):
        booking = self.store.get(Booking, _parse_id(booking_id, "id"))
        if not booking:
            raise NotFoundError("Booking not found")
        if actor is not None and not _is_admin(actor) and booking.user_email != actor.email:
            raise ForbiddenError("Forbidden")
        return booking

    def list(self, actor, requester=None, status=None, search=None, page=None, size=None):
        """
        Filters compose: requester AND status AND title substring.

        Without ``size`` every matching booking is returned. With it, ``page``
        (1-based, default 1) selects a window of the ordered result.
        """
        rows, _ = self.list_page(actor, requester, status, search, page=page, size=size)
        return rows

    def list_page(self, actor, requester=None, status=None, search=None, page=None, size=None):
        """Like ``list`` but also returns the unpaged total."""
        page = _parse_positive(page, "page", default=1)
        size = _parse_positive(size, "size", default=None)

        if not _is_admin(actor):
            if requester and requester.strip().lower() != actor.email:
                raise ForbiddenError("Cannot list another user's bookings")
            requester = actor.email

        q = self.store.query(Booking)
        if requester:
            q = q.filter(Booking.user_email == requester.strip().lower())
        if status:
            if status not in BOOKING_STATUSES:
                raise ValidationError(f"Unknown status {status!r}", field="status")
            q = q.filter(Booking.status == status)
        if search:
            escaped = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
            q = q.filter(Booking.court_title.ilike(f"%{escaped}%", escape="\\"))

        total = q.count()
        q = q.order_by(Booking.date.desc(), Booking.created_at.desc(), Booking.id.desc())
        if size is not None:
            q = q.offset((page - 1) * size).limit(size)
        return q.all(), total

    # ---------- transitions ----------
    def transition(self, booking_id, new_status, actor):
        """
        Move a booking to ``new_status`` (administrators only).

        Returns ``{"booking", "booking_update", "user_update"}``; the last key
        is present only for approvals. The booking write is committed before
        the promotion runs, so a failed promotion is reported as a
        PartialFailureError and can be retried by approving again.
        """
        booking = self.get(booking_id)
        if not _is_admin(actor):
            raise ForbiddenError("Only administrators can change booking status")
        if new_status not in BOOKING_STATUSES:
            raise ValidationError(f"Unknown status {new_status!r}", field="status")

        current = booking.status
        if not can_transition(current, new_status):
            raise InvalidTransitionError(current, new_status)

        modified = 0
        if current != new_status:
            booking.status = new_status
            if new_status == "rejected":
                booking.claims.clear()
            self.store.commit()
            modified = 1

        result = {
            "booking": booking,
            "booking_update": {"matched": 1, "modified": modified},
        }
        if new_status != "approved":
            return result

        booking_ref = {"bookingId": booking.id, "status": booking.status}
        try:
            result["user_update"] = self.membership.promote(booking.user_email)
        except ServiceError as exc:
            self.store.rollback()
            logger.warning("Booking %s approved but promotion of %s failed: %s", booking_ref["bookingId"], booking.user_email, exc)
            raise PartialFailureError(
                "Booking approved but membership promotion failed",
                completed=["booking"],
                failed=["user"],
                cause=exc,
                result=booking_ref,
            ) from exc
        return result

    def confirm(self, booking):
        """Stage approved -> confirmed; the caller commits."""
        if booking.status == "confirmed":
            return booking
        if not can_transition(booking.status, "confirmed"):
            raise InvalidTransitionError(booking.status, "confirmed", message=f"Booking is {booking.status}, only approved bookings can be paid")
        booking.status = "confirmed"
        return booking

    # ---------- delete ----------
    def delete(self, booking_id, actor):
        booking = self.get(booking_id)
        if not _is_admin(actor) and booking.user_email != actor.email:
            raise ForbiddenError("Only the requester or an administrator can delete a booking")
        if booking.status == "confirmed":
            raise InvalidTransitionError(
                booking.status, "deleted",
                message="Confirmed bookings cannot be deleted; cancel and refund instead",
            )

        self.store.delete(booking)
        self.store.commit()
        return {"deleted": 1}
