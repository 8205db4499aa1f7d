import logging
import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

import stripe

from services.errors import PaymentGatewayError, ValidationError

logger = logging.getLogger(__name__)

# currencies Stripe charges in whole units
ZERO_DECIMAL_CURRENCIES = {
    "bif", "clp", "djf", "gnf", "jpy", "kmf", "krw", "mga",
    "pyg", "rwf", "ugx", "vnd", "vuv", "xaf", "xof", "xpf",
}


def positive_amount(value, field="amount"):
    """Parse a positive currency amount or raise ValidationError naming ``field``."""
    if value is None or isinstance(value, bool):
        raise ValidationError(f"Missing field: {field}", field=field)
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Invalid {field}", field=field)
    if not amount.is_finite() or amount <= 0:
        raise ValidationError(f"{field} must be greater than 0", field=field)
    # amounts are stored as floats
    if not math.isfinite(float(amount)):
        raise ValidationError(f"{field} is too large", field=field)
    return amount


def to_minor_units(amount, currency):
    amount = positive_amount(amount)
    if currency.lower() in ZERO_DECIMAL_CURRENCIES:
        return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class StripeGateway:
    """Creates Stripe PaymentIntents; the client finishes them with the returned secret."""

    provider = "STRIPE"

    def __init__(self, api_key, currency="bdt"):
        self.api_key = api_key
        self.currency = currency

    @classmethod
    def from_config(cls, config):
        return cls(
            api_key=config.get("STRIPE_SECRET_KEY"),
            currency=config.get("PAYMENT_CURRENCY", "bdt"),
        )

    def create_charge_intent(self, amount, currency=None):
        currency = (currency or self.currency).lower()
        minor = to_minor_units(amount, currency)

        if not self.api_key:
            raise PaymentGatewayError("Stripe secret key missing (STRIPE_SECRET_KEY)")

        try:
            intent = stripe.PaymentIntent.create(
                api_key=self.api_key,
                amount=minor,
                currency=currency,
                payment_method_types=["card"],
            )
        except stripe.StripeError as exc:
            logger.warning("Stripe rejected payment intent: %s", exc)
            raise PaymentGatewayError(
                "Failed to create payment intent",
                details={"provider_message": getattr(exc, "user_message", None) or str(exc)},
            ) from exc

        return {
            "client_secret": intent["client_secret"],
            "intent_id": intent["id"],
            "amount": minor,
            "currency": currency,
        }
