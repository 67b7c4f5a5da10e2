from flask import Blueprint, jsonify, request
from flask_login import login_required

from ..pagination import page_args
from ..security import require_owner_or_admin
from ..services import watchlists

watchlists_bp = Blueprint("watchlists", __name__, url_prefix="/api/users/<int:user_id>/watchlists")


def _payload():
    data = request.get_json(silent=True) or {}
    return data.get("name"), data.get("description")


@watchlists_bp.post("")
@login_required
def create_watchlist(user_id):
    require_owner_or_admin(user_id)
    name, description = _payload()
    watchlist = watchlists.create_watchlist(user_id, name, description)
    return jsonify(watchlist.to_dict()), 201


@watchlists_bp.get("")
@login_required
def list_watchlists(user_id):
    require_owner_or_admin(user_id)
    page, per_page = page_args(request.args)
    return jsonify(watchlists.list_watchlists(user_id, page, per_page).to_dict())


@watchlists_bp.get("/<int:watchlist_id>")
@login_required
def get_watchlist(user_id, watchlist_id):
    require_owner_or_admin(user_id)
    return jsonify(watchlists.get_watchlist(user_id, watchlist_id).to_dict())


@watchlists_bp.put("/<int:watchlist_id>")
@login_required
def update_watchlist(user_id, watchlist_id):
    require_owner_or_admin(user_id)
    name, description = _payload()
    return jsonify(watchlists.update_watchlist(user_id, watchlist_id, name, description).to_dict())


@watchlists_bp.delete("/<int:watchlist_id>")
@login_required
def delete_watchlist(user_id, watchlist_id):
    require_owner_or_admin(user_id)
    watchlists.delete_watchlist(user_id, watchlist_id)
    return ("", 204)


@watchlists_bp.post("/<int:watchlist_id>/movies/<int:movie_id>")
@login_required
def add_movie(user_id, watchlist_id, movie_id):
    require_owner_or_admin(user_id)
    return jsonify(watchlists.add_movie(user_id, watchlist_id, movie_id).to_dict()), 201


@watchlists_bp.delete("/<int:watchlist_id>/movies/<int:movie_id>")
@login_required
def remove_movie(user_id, watchlist_id, movie_id):
    require_owner_or_admin(user_id)
    return jsonify(watchlists.remove_movie(user_id, watchlist_id, movie_id).to_dict())
