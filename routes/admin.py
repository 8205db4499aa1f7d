from flask import Blueprint, jsonify, g

from models.court import Court
from models.user import User
from security.rbac import require_roles
from utils.audit import log_event

admin_bp = Blueprint("admin", __name__)


@admin_bp.get("/admin-stats")
@require_roles("admin")
def admin_stats():
    stats = {
        "totalCourts": Court.query.count(),
        "totalUsers": User.query.count(),
        "totalMembers": User.query.filter_by(role="member").count(),
    }
    log_event("ADMIN_STATS_VIEW", user_id=g.user.id)
    return jsonify(stats), 200
