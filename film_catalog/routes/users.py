from flask import Blueprint, current_app, jsonify, request
from flask_login import login_required

from ..errors import InvalidArgument
from ..pagination import page_args
from ..security import require_owner_or_admin
from ..services import favorites, recommendations, watched

users_bp = Blueprint("users", __name__)


def _limit_arg(default: int) -> int:
    try:
        return int(request.args.get("limit", default))
    except ValueError:
        raise InvalidArgument("limit must be an integer")


@users_bp.post("/api/users/<int:user_id>/movies/<int:movie_id>/watched")
@login_required
def mark_watched(user_id, movie_id):
    require_owner_or_admin(user_id)
    record = watched.mark_watched(user_id, movie_id)
    return jsonify(record.to_dict()), 201


@users_bp.delete("/api/users/<int:user_id>/movies/<int:movie_id>/watched")
@login_required
def unmark_watched(user_id, movie_id):
    require_owner_or_admin(user_id)
    watched.unmark_watched(user_id, movie_id)
    return ("", 204)


@users_bp.get("/api/users/<int:user_id>/watched")
@login_required
def list_watched(user_id):
    require_owner_or_admin(user_id)
    items = [
        {**record.to_dict(), "movie": record.movie.to_dict()}
        for record in watched.list_watched(user_id)
    ]
    return jsonify({"items": items})


@users_bp.post("/api/users/<int:user_id>/favorites/<int:movie_id>")
@login_required
def add_favorite(user_id, movie_id):
    require_owner_or_admin(user_id)
    favorites.add_favorite(user_id, movie_id)
    return jsonify({"ok": True}), 201


@users_bp.delete("/api/users/<int:user_id>/favorites/<int:movie_id>")
@login_required
def remove_favorite(user_id, movie_id):
    require_owner_or_admin(user_id)
    favorites.remove_favorite(user_id, movie_id)
    return ("", 204)


@users_bp.get("/api/users/<int:user_id>/favorites")
@login_required
def list_favorites(user_id):
    require_owner_or_admin(user_id)
    return jsonify({"items": [f.movie.to_dict() for f in favorites.list_favorites(user_id)]})


@users_bp.get("/api/users/<int:user_id>/top-genres")
@login_required
def top_genres(user_id):
    require_owner_or_admin(user_id)
    limit = _limit_arg(current_app.config.get("TOP_GENRES_LIMIT", 3))
    return jsonify({"genres": [g.to_dict() for g in recommendations.top_genres(user_id, limit)]})


@users_bp.get("/api/users/<int:user_id>/recommendations")
@login_required
def personalized_recommendations(user_id):
    require_owner_or_admin(user_id)
    limit = _limit_arg(current_app.config.get("TOP_GENRES_LIMIT", 3))
    page, per_page = page_args(request.args)
    result = recommendations.recommend_for_user(user_id, limit, page, per_page)
    return jsonify(result.to_dict())
