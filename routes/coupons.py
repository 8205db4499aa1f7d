from flask import Blueprint, request, jsonify, g

from security.rbac import require_roles
from utils.auth_context import login_required
from utils.audit import log_event
from utils.serializers import coupon_json
from utils.services import coupon_service

coupons_bp = Blueprint("coupons", __name__)


@coupons_bp.post("/validate-coupon")
@login_required
def validate_coupon():
    data = request.get_json(silent=True) or {}
    result = coupon_service().validate(data.get("code"))
    if not result["valid"]:
        return jsonify(valid=False), 200
    return jsonify(valid=True, discountAmount=result["discount_amount"]), 200


@coupons_bp.get("/coupons")
def list_coupons():
    return jsonify([coupon_json(c) for c in coupon_service().list()]), 200


# ---------- ADMIN: manage coupons ----------
@coupons_bp.post("/coupons")
@require_roles("admin")
def create_coupon():
    data = request.get_json(silent=True) or {}
    coupon = coupon_service().create(data.get("code"), data.get("discountAmount"), data.get("description"))

    log_event("COUPON_CREATE", user_id=g.user.id, entity="coupon", entity_id=coupon.id, metadata={"code": coupon.code})
    return jsonify(coupon_json(coupon)), 201


@coupons_bp.patch("/coupons/<int:coupon_id>")
@require_roles("admin")
def update_coupon(coupon_id: int):
    data = request.get_json(silent=True) or {}
    coupon = coupon_service().update(coupon_id, data)

    log_event("COUPON_UPDATE", user_id=g.user.id, entity="coupon", entity_id=coupon.id)
    return jsonify(coupon_json(coupon)), 200


@coupons_bp.delete("/coupons/<int:coupon_id>")
@require_roles("admin")
def delete_coupon(coupon_id: int):
    coupon_service().delete(coupon_id)

    log_event("COUPON_DELETE", user_id=g.user.id, entity="coupon", entity_id=coupon_id)
    return jsonify(deletedCount=1), 200
