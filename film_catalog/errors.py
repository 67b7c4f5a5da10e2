import logging
from datetime import datetime, timezone

from flask import jsonify
from werkzeug.exceptions import HTTPException

log = logging.getLogger(__name__)


class CatalogError(Exception):
    """Base for every error the review, moderation and recommendation services raise."""

    status_code = 500
    code = "error"

    def __init__(self, message: str, reason: str = None):
        super().__init__(message)
        self.message = message
        self.reason = reason

    def to_dict(self):
        body = {
            "ok": False,
            "error": self.message,
            "code": self.code,
            "status": self.status_code,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if self.reason:
            body["reason"] = self.reason
        return body


class NotFound(CatalogError):
    status_code = 404
    code = "not_found"


class InvalidState(CatalogError):
    status_code = 409
    code = "invalid_state"


class Conflict(CatalogError):
    status_code = 409
    code = "conflict"


class Forbidden(CatalogError):
    status_code = 403
    code = "forbidden"


class InvalidArgument(CatalogError):
    status_code = 400
    code = "invalid_argument"


# Reasons carried by InvalidState / Conflict
NOT_WATCHED = "NotWatched"
ALREADY_REVIEWED = "AlreadyReviewed"
SELF_FLAG = "SelfFlag"
ALREADY_FLAGGED = "AlreadyFlagged"
ALREADY_WATCHED = "AlreadyWatched"
ALREADY_FAVORITE = "AlreadyFavorite"
ALREADY_IN_WATCHLIST = "AlreadyInWatchlist"


def register_error_handlers(app):
    @app.errorhandler(CatalogError)
    def handle_catalog_error(exc: CatalogError):
        log.warning("%s rejected: %s", exc.code, exc.message)
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return (
            jsonify(
                {
                    "ok": False,
                    "error": exc.description,
                    "code": (exc.name or "error").lower().replace(" ", "_"),
                    "status": exc.code,
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                }
            ),
            exc.code,
        )
