from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from ..errors import InvalidArgument
from ..pagination import page_args
from ..security import admin_required
from ..services import catalog, recommendations, reviews

movies_bp = Blueprint("movies", __name__)


def _optional_int(value, name):
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidArgument(f"{name} must be an integer")


@movies_bp.get("/api/movies")
@login_required
def list_movies():
    """Movie listing, optionally filtered to any of ?genre=Action,Drama."""
    page, per_page = page_args(request.args)
    genre_filter = request.args.get("genre")
    genres = []
    if genre_filter:
        genres = [g.strip() for g in genre_filter.split(",") if g.strip()]
    return jsonify(catalog.list_movies(page, per_page, genres).to_dict())


@movies_bp.get("/api/movies/<int:movie_id>")
@login_required
def get_movie(movie_id):
    return jsonify(catalog.get_movie(movie_id).to_dict())


@movies_bp.get("/api/movies/top-rated")
@login_required
def top_rated():
    page, per_page = page_args(request.args)
    return jsonify(reviews.top_rated_movies(page, per_page).to_dict())


@movies_bp.post("/api/movies")
@admin_required
def create_movie():
    data = request.get_json(silent=True) or {}
    genres = data.get("genres") or []
    if not isinstance(genres, list):
        raise InvalidArgument("genres must be a list of names")
    movie = catalog.create_movie(
        title=data.get("title"),
        genre_names=genres,
        year=_optional_int(data.get("year"), "year"),
        overview=data.get("overview"),
        runtime=_optional_int(data.get("runtime"), "runtime"),
        added_by=current_user.id,
    )
    return jsonify(movie.to_dict()), 201


@movies_bp.post("/api/movies/import")
@admin_required
def import_movie():
    data = request.get_json(silent=True) or {}
    tmdb_id = _optional_int(data.get("tmdb_id"), "tmdb_id")
    if not tmdb_id:
        raise InvalidArgument("tmdb_id required")
    movie = catalog.import_movie(tmdb_id, added_by=current_user.id)
    return jsonify(movie.to_dict()), 201


@movies_bp.get("/api/genres")
@login_required
def list_genres():
    return jsonify({"genres": [g.to_dict() for g in catalog.list_genres()]})


@movies_bp.get("/api/genres/<int:genre_id>")
@login_required
def get_genre(genre_id):
    return jsonify(catalog.get_genre(genre_id).to_dict())


@movies_bp.post("/api/genres")
@admin_required
def create_genre():
    data = request.get_json(silent=True) or {}
    genre = catalog.create_genre(data.get("name"))
    return jsonify(genre.to_dict()), 201


@movies_bp.get("/api/recommendations")
@login_required
def recommend_by_genres():
    """Movies matching any of ?genre_ids=1,2,3."""
    raw = request.args.get("genre_ids") or ""
    try:
        genre_ids = [int(g) for g in raw.split(",") if g.strip()]
    except ValueError:
        raise InvalidArgument("genre_ids must be a comma separated list of integers")
    page, per_page = page_args(request.args)
    return jsonify(recommendations.recommend(genre_ids, page, per_page).to_dict())
