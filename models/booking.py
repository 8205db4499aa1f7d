from models.db import db, utcnow

BOOKING_STATUSES = ("pending", "approved", "rejected", "confirmed")


class Booking(db.Model):
    __tablename__ = "bookings"

    id = db.Column(db.Integer, primary_key=True)

    user_email = db.Column(db.String(255), nullable=False, index=True)
    court_id = db.Column(db.Integer, db.ForeignKey("courts.id"), nullable=False, index=True)

    # denormalized at creation time
    court_title = db.Column(db.String(120), nullable=False)
    court_type = db.Column(db.String(60), nullable=False)

    date = db.Column(db.Date, nullable=False, index=True)
    slot_labels = db.Column(db.JSON, nullable=False, default=list)
    price = db.Column(db.Float, nullable=False)
    coupon_code = db.Column(db.String(60), nullable=True)

    status = db.Column(db.String(20), nullable=False, default="pending")
    # status values: pending, approved, rejected, confirmed

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    claims = db.relationship(
        "BookingSlot",
        backref="booking",
        cascade="all, delete-orphan",
        lazy=True,
    )


class BookingSlot(db.Model):
    """A (court, date, slot) claim held by an active booking."""

    __tablename__ = "booking_slots"

    id = db.Column(db.Integer, primary_key=True)
    booking_id = db.Column(db.Integer, db.ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)

    court_id = db.Column(db.Integer, nullable=False)
    date = db.Column(db.Date, nullable=False)
    label = db.Column(db.String(60), nullable=False)

    __table_args__ = (
        # only one active booking can hold a given slot (prevents double booking)
        db.UniqueConstraint("court_id", "date", "label", name="uq_booking_slot_claim"),
    )
