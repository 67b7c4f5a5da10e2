"""Per-user review aggregates. Read-only."""
from typing import Dict

from sqlalchemy import func, select

from ..errors import InvalidArgument
from ..extensions import db
from ..models import SCORE_FIELDS, Review
from . import catalog

# "direction" -> "direction_score", etc.
CRITERIA = {field[: -len("_score")]: field for field in SCORE_FIELDS}


def _criterion_column(criterion: str):
    field = CRITERIA.get(criterion) or (criterion if criterion in SCORE_FIELDS else None)
    if field is None:
        raise InvalidArgument(f"Unknown score criterion: {criterion}")
    return getattr(Review, field)


def count_reviews(user_id: int) -> int:
    stmt = select(func.count()).select_from(Review).where(Review.user_id == user_id)
    return db.session.execute(stmt).scalar_one()


def sum_likes(user_id: int) -> int:
    stmt = select(func.coalesce(func.sum(Review.likes_count), 0)).where(Review.user_id == user_id)
    return int(db.session.execute(stmt).scalar_one())


def average_score(user_id: int, criterion: str) -> float:
    """Mean score for one criterion; 0.0 when the user has no reviews."""
    column = _criterion_column(criterion)
    value = db.session.execute(select(func.avg(column)).where(Review.user_id == user_id)).scalar_one()
    return float(value) if value is not None else 0.0


def average_weighted(user_id: int) -> Dict[str, float]:
    """
    The four per-criterion means side by side. Despite the name no weights
    are applied; each criterion is a plain mean.
    """
    catalog.get_user(user_id)
    return {f"{name}_average": average_score(user_id, name) for name in CRITERIA}


def user_statistics(user_id: int) -> Dict[str, object]:
    user = catalog.get_user(user_id)
    stats = {
        "user_id": user.id,
        "username": user.username,
        "reviews_count": count_reviews(user_id),
        "total_likes": sum_likes(user_id),
    }
    stats.update(average_weighted(user_id))
    return stats
