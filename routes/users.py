from flask import Blueprint, request, jsonify, g

from security.rbac import require_roles
from utils.auth_context import login_required
from utils.audit import log_event
from utils.serializers import user_json
from utils.services import user_service

users_bp = Blueprint("users", __name__)


# ---------- first sign-in: idempotent upsert ----------
@users_bp.post("/users")
def upsert_user():
    data = request.get_json(silent=True) or {}
    user, created = user_service().upsert(data.get("email"), data.get("name"), data.get("photoURL") or data.get("photoUrl"))
    if not created:
        return jsonify(message="User already exists", user=user_json(user)), 200

    log_event("USER_CREATE", user_id=user.id, entity="user", entity_id=user.id)
    return jsonify(user_json(user)), 201


@users_bp.get("/users/<string:email>/role")
@login_required
def user_role(email: str):
    return jsonify(role=user_service().role_of(email)), 200


# ---------- ADMIN: members ----------
@users_bp.get("/members")
@require_roles("admin")
def list_members():
    search = (request.args.get("search") or "").strip() or None
    return jsonify([user_json(u) for u in user_service().list_members(search)]), 200


@users_bp.delete("/members/<int:user_id>")
@require_roles("admin")
def delete_member(user_id: int):
    user_service().delete(user_id)

    log_event("MEMBER_DELETE", user_id=g.user.id, entity="user", entity_id=user_id)
    return jsonify(deletedCount=1), 200
