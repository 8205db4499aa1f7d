from flask import Blueprint, request, jsonify, g

from utils.auth_context import login_required
from utils.audit import log_event
from utils.serializers import rating_json
from utils.services import popularity_service, rating_service

ratings_bp = Blueprint("ratings", __name__)


@ratings_bp.post("/ratings")
@login_required
def create_rating():
    data = request.get_json(silent=True) or {}
    row = rating_service().submit(g.user, data.get("courtId"), data.get("rating"), data.get("comment"))

    log_event("RATING_CREATE", user_id=g.user.id, entity="rating", entity_id=row.id, metadata={"court_id": row.court_id})
    return jsonify(rating_json(row)), 201


@ratings_bp.get("/ratings")
def list_ratings():
    rows = rating_service().list(
        court_id=request.args.get("courtId", type=int),
        email=request.args.get("email"),
    )
    return jsonify([rating_json(r) for r in rows]), 200


@ratings_bp.patch("/ratings/<int:rating_id>")
@login_required
def update_rating(rating_id: int):
    data = request.get_json(silent=True) or {}
    row = rating_service().update(g.user, rating_id, data)

    log_event("RATING_UPDATE", user_id=g.user.id, entity="rating", entity_id=row.id)
    return jsonify(rating_json(row)), 200


@ratings_bp.delete("/ratings/<int:rating_id>")
@login_required
def delete_rating(rating_id: int):
    rating_service().delete(g.user, rating_id)

    log_event("RATING_DELETE", user_id=g.user.id, entity="rating", entity_id=rating_id)
    return jsonify(deletedCount=1), 200


# ---------- public: courts ranked by average rating ----------
@ratings_bp.get("/popular-courts")
def popular_courts():
    limit = request.args.get("limit", type=int)
    rows = popularity_service().rank_facilities(limit)
    return jsonify([
        {
            "_id": r["id"],
            "name": r["name"],
            "type": r["type"],
            "image": r["image"],
            "location": r["location"],
            "pricePerSession": r["price_per_session"],
            "averageRating": r["average_rating"],
            "totalRatings": r["total_ratings"],
        }
        for r in rows
    ]), 200
