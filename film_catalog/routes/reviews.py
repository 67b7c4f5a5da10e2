from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from ..errors import InvalidArgument
from ..models import SCORE_FIELDS
from ..pagination import page_args
from ..security import admin_required, require_owner, require_owner_or_admin
from ..services import catalog, flags, reviews, statistics

reviews_bp = Blueprint("reviews", __name__)


def _review_payload():
    data = request.get_json(silent=True) or {}
    scores = {field: data.get(field) for field in SCORE_FIELDS}
    return data.get("content"), scores


@reviews_bp.post("/api/users/<int:user_id>/movies/<int:movie_id>/reviews")
@login_required
def create_review(user_id, movie_id):
    # Nobody, admins included, writes a review on someone else's behalf
    require_owner(user_id)
    content, scores = _review_payload()
    review = reviews.create_review(user_id, movie_id, content, scores)
    return jsonify(review.to_dict()), 201


@reviews_bp.get("/api/reviews/<int:review_id>")
@login_required
def get_review(review_id):
    review = reviews.get_review(review_id)
    if review.hidden and not current_user.is_admin and review.user_id != current_user.id:
        return jsonify({"id": review.id, "hidden": True})
    return jsonify(review.to_dict())


@reviews_bp.put("/api/reviews/<int:review_id>")
@login_required
def update_review(review_id):
    content, scores = _review_payload()
    review = reviews.update_review(review_id, current_user.id, content, scores)
    return jsonify(review.to_dict())


@reviews_bp.delete("/api/reviews/<int:review_id>")
@login_required
def delete_review(review_id):
    require_owner_or_admin(catalog.owner_of(review_id))
    reviews.delete_review(review_id, current_user.id)
    return ("", 204)


@reviews_bp.post("/api/reviews/<int:review_id>/like")
@login_required
def like_review(review_id):
    review = reviews.like_review(review_id)
    return jsonify({"id": review.id, "likes_count": review.likes_count})


@reviews_bp.post("/api/reviews/<int:review_id>/flag")
@login_required
def flag_review(review_id):
    data = request.get_json(silent=True) or {}
    reason = data.get("flag_reason")
    if isinstance(reason, str) and reason.strip() and len(reason.strip()) < 10:
        raise InvalidArgument("Flag reason must be between 10 and 255 characters.")
    flag = flags.flag_review(review_id, current_user.id, reason)
    return jsonify(flag.to_dict()), 201


@reviews_bp.get("/api/movies/<int:movie_id>/reviews")
@login_required
def reviews_for_movie(movie_id):
    page, per_page = page_args(request.args)
    return jsonify(reviews.get_reviews_for_movie(movie_id, page, per_page).to_dict())


@reviews_bp.get("/api/users/<int:user_id>/reviews")
@login_required
def reviews_for_user(user_id):
    require_owner_or_admin(user_id)
    page, per_page = page_args(request.args)
    return jsonify(reviews.get_reviews_for_user(user_id, page, per_page).to_dict())


@reviews_bp.get("/api/reviews/<int:user_id>/statistics")
@admin_required
def user_statistics(user_id):
    return jsonify(statistics.user_statistics(user_id))


@reviews_bp.get("/api/reviews/<int:user_id>/average-weighted")
@admin_required
def average_weighted(user_id):
    return jsonify(statistics.average_weighted(user_id))
