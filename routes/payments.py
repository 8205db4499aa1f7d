from flask import Blueprint, request, jsonify, g

from utils.auth_context import login_required
from utils.audit import log_event
from utils.serializers import booking_json, payment_json
from utils.services import payment_service

payments_bp = Blueprint("payments", __name__)


@payments_bp.post("/create-payment-intent")
@login_required
def create_payment_intent():
    data = request.get_json(silent=True) or {}
    intent = payment_service().create_charge_intent(data.get("price"), data.get("currency"))

    log_event("PAYMENT_INTENT_CREATED", user_id=g.user.id, entity="payment_intent", entity_id=intent.get("intent_id"),
              metadata={"amount": intent.get("amount"), "currency": intent.get("currency")})
    return jsonify(clientSecret=intent["client_secret"]), 200


# ---------- reconcile a completed payment with its booking ----------
@payments_bp.post("/payments")
@login_required
def record_payment():
    data = request.get_json(silent=True) or {}
    amount = data.get("amount") if data.get("amount") is not None else data.get("price")

    result = payment_service().record_payment(
        g.user,
        booking_id=data.get("bookingId"),
        amount=amount,
        transaction_id=data.get("transactionId"),
        currency=data.get("currency"),
    )
    payment = result["payment"]

    log_event("PAYMENT_RECORDED", user_id=g.user.id, entity="payment", entity_id=payment.id,
              metadata={"booking_id": payment.booking_id, "transaction_id": payment.transaction_id})
    return jsonify(
        payment=payment_json(payment),
        booking=booking_json(result["booking"]),
        paymentInsert={"insertedId": result["payment_insert"]["inserted_id"]},
        bookingUpdate=result["booking_update"],
    ), 201


@payments_bp.get("/payments")
@login_required
def list_payments():
    rows = payment_service().list_payments(g.user, email=request.args.get("email"))
    return jsonify([payment_json(p) for p in rows]), 200
