from flask import Blueprint, current_app, jsonify, request

from ..errors import InvalidArgument
from ..pagination import page_args, paginate_list
from ..security import admin_required
from ..services import flags, reviews

moderation_bp = Blueprint("moderation", __name__, url_prefix="/api/moderation")


@moderation_bp.get("/reviews/flagged")
@admin_required
def heavily_flagged():
    default_min = current_app.config.get("DEFAULT_MIN_FLAGS", 10)
    try:
        min_flags = int(request.args.get("min_flags", default_min))
    except ValueError:
        raise InvalidArgument("min_flags must be an integer")
    page, per_page = page_args(request.args)
    flagged = flags.get_heavily_flagged_reviews(min_flags)
    return jsonify(paginate_list(flagged, page, per_page).to_dict())


@moderation_bp.patch("/reviews/<int:review_id>/hide")
@admin_required
def hide_review(review_id):
    return jsonify(reviews.toggle_hide_review(review_id, True).to_dict())


@moderation_bp.patch("/reviews/<int:review_id>/unhide")
@admin_required
def unhide_review(review_id):
    return jsonify(reviews.toggle_hide_review(review_id, False).to_dict())
