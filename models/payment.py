from models.db import db, utcnow

class Payment(db.Model):
    __tablename__ = "payments"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), nullable=False, index=True)
    booking_id = db.Column(db.Integer, db.ForeignKey("bookings.id"), nullable=False, index=True)

    provider = db.Column(db.String(20), nullable=False, default="STRIPE")
    amount = db.Column(db.Float, nullable=False)
    currency = db.Column(db.String(10), nullable=False, default="bdt")
    transaction_id = db.Column(db.String(255), nullable=True, unique=True)

    status = db.Column(db.String(20), nullable=False, default="paid")

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        # a booking accumulates at most one successful payment
        db.UniqueConstraint("booking_id", name="uq_payment_booking_once"),
    )
