import logging

from models.booking import Booking
from models.payment import Payment
from services.bookings import BookingService
from services.errors import ConflictError, ForbiddenError, ValidationError
from services.gateway import positive_amount

logger = logging.getLogger(__name__)


class PaymentService:
    """
    Reconciles a completed gateway payment with its booking.

    The payment insert and the booking confirmation are committed together,
    so a ``paid`` payment never points at a booking that is not ``confirmed``.
    """

    def __init__(self, store, gateway=None, bookings=None):
        self.store = store
        self.gateway = gateway
        self.bookings = bookings or BookingService(store)

    def create_charge_intent(self, amount, currency=None):
        positive_amount(amount, field="price")
        return self.gateway.create_charge_intent(amount, currency)

    def record_payment(self, actor, booking_id, amount, transaction_id=None, currency=None):
        amount = positive_amount(amount, field="amount")

        try:
            booking = self.store.get(Booking, int(booking_id))
        except (TypeError, ValueError):
            booking = None
        if not booking:
            raise ValidationError("bookingId does not reference an existing booking", field="bookingId")

        if actor.role != "admin" and booking.user_email != actor.email:
            raise ForbiddenError("Cannot pay for another user's booking")

        if booking.status == "confirmed" or self.store.find_one(Payment, booking_id=booking.id):
            raise ConflictError("Booking already paid", field="bookingId")
        if transaction_id and self.store.find_one(Payment, transaction_id=transaction_id):
            raise ConflictError("transactionId already recorded", field="transactionId")

        payment = Payment(
            email=actor.email,
            booking_id=booking.id,
            amount=float(amount),
            currency=(currency or getattr(self.gateway, "currency", None) or "bdt").lower(),
            transaction_id=transaction_id or None,
            provider=getattr(self.gateway, "provider", "STRIPE"),
            status="paid",
        )

        with self.store.atomic(conflict_message="Payment conflicts with an existing payment"):
            self.bookings.confirm(booking)
            self.store.add(payment)

        logger.info("Payment %s recorded, booking %s confirmed", payment.id, booking.id)
        return {
            "payment": payment,
            "booking": booking,
            "payment_insert": {"inserted_id": payment.id},
            "booking_update": {"matched": 1, "modified": 1},
        }

    def list_payments(self, actor, email=None):
        if actor.role != "admin":
            if email and email.strip().lower() != actor.email:
                raise ForbiddenError("Cannot view another user's payments")
            email = actor.email

        q = self.store.query(Payment)
        if email:
            q = q.filter(Payment.email == email.strip().lower())
        return q.order_by(Payment.created_at.desc(), Payment.id.desc()).all()
