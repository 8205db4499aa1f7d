from flask import Blueprint, request, jsonify, g

from security.rbac import require_roles
from utils.audit import log_event
from utils.serializers import court_json
from utils.services import court_service

court_bp = Blueprint("court", __name__)


@court_bp.post("/courts")
@require_roles("admin")
def create_court():
    data = request.get_json(silent=True) or {}
    court = court_service().create(data)

    log_event("COURT_CREATE", user_id=g.user.id, entity="court", entity_id=court.id)
    return jsonify(court_json(court)), 201


@court_bp.get("/courts")
def list_courts():
    court_type = (request.args.get("type") or "").strip() or None
    rows = court_service().list(court_type=court_type)
    return jsonify([court_json(c) for c in rows]), 200


@court_bp.get("/courts/<int:court_id>")
def get_court(court_id: int):
    return jsonify(court_json(court_service().get(court_id))), 200


@court_bp.patch("/courts/<int:court_id>")
@require_roles("admin")
def update_court(court_id: int):
    data = request.get_json(silent=True) or {}
    court = court_service().update(court_id, data)

    log_event("COURT_UPDATE", user_id=g.user.id, entity="court", entity_id=court.id,
              metadata={"fields": sorted(data)})
    return jsonify(court_json(court)), 200


@court_bp.delete("/courts/<int:court_id>")
@require_roles("admin")
def delete_court(court_id: int):
    result = court_service().delete(court_id)

    log_event("COURT_DELETE", user_id=g.user.id, entity="court", entity_id=court_id, metadata=result)
    return jsonify(deletedCount=result["deleted"]), 200


@court_bp.get("/courtsCount")
def courts_count():
    return jsonify(totalCourtsCount=court_service().count()), 200
