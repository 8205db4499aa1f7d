from flask import Blueprint, request, jsonify, g

from services.errors import ValidationError
from utils.auth_context import login_required
from utils.audit import log_event
from utils.serializers import booking_json
from utils.services import booking_service

booking_bp = Blueprint("booking", __name__)


# ---------- PLAYERS: request a booking (starts pending) ----------
@booking_bp.post("/bookings")
@login_required
def create_booking():
    data = request.get_json(silent=True) or {}
    booking = booking_service().create(g.user, data)

    log_event("BOOKING_CREATE", user_id=g.user.id, entity="booking", entity_id=booking.id,
              metadata={"court_id": booking.court_id, "date": booking.date, "slots": booking.slot_labels})
    return jsonify(booking_json(booking)), 201


# ---------- list / filter (players see their own, admins see all) ----------
@booking_bp.get("/bookings")
@login_required
def list_bookings():
    requester = request.args.get("email") or request.args.get("requester")
    status = request.args.get("status")
    search = (request.args.get("search") or "").strip() or None

    rows, total = booking_service().list_page(
        g.user,
        requester=requester,
        status=status,
        search=search,
        page=request.args.get("page"),
        size=request.args.get("size"),
    )
    resp = jsonify([booking_json(b) for b in rows])
    resp.headers["X-Total-Count"] = str(total)
    return resp, 200


@booking_bp.get("/bookings/<int:booking_id>")
@login_required
def get_booking(booking_id: int):
    booking = booking_service().get(booking_id, g.user)
    return jsonify(booking_json(booking)), 200


# ---------- ADMIN: approve / reject (approval promotes the requester) ----------
@booking_bp.patch("/bookings/<int:booking_id>")
@login_required
def update_booking_status(booking_id: int):
    data = request.get_json(silent=True) or {}
    status = (data.get("status") or "").strip().lower()
    if not status:
        raise ValidationError("Missing field: status", field="status")

    result = booking_service().transition(booking_id, status, g.user)
    booking = result["booking"]

    log_event("BOOKING_STATUS_CHANGE", user_id=g.user.id, entity="booking", entity_id=booking.id,
              metadata={"status": booking.status, "promotion": result.get("user_update")})

    out = {
        "booking": booking_json(booking),
        "bookingUpdate": result["booking_update"],
    }
    if "user_update" in result:
        out["userUpdate"] = result["user_update"]
    return jsonify(out), 200


@booking_bp.delete("/bookings/<int:booking_id>")
@login_required
def delete_booking(booking_id: int):
    result = booking_service().delete(booking_id, g.user)

    log_event("BOOKING_DELETE", user_id=g.user.id, entity="booking", entity_id=booking_id)
    return jsonify(deletedCount=result["deleted"]), 200
