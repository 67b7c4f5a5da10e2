"""
Community flagging and moderation.

A review auto-hides once its flag count reaches the configured threshold.
Nothing here ever un-hides a review; that is an admin action
(``reviews.toggle_hide_review``).
"""
import logging
from typing import List, NamedTuple, Optional

from flask import current_app
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from ..errors import (
    ALREADY_FLAGGED,
    SELF_FLAG,
    Conflict,
    InvalidArgument,
    InvalidState,
    NotFound,
)
from ..extensions import atomic, db
from ..models import ContentFlag, Review, User

log = logging.getLogger(__name__)

DEFAULT_AUTO_HIDE_THRESHOLD = 10
REASON_MAX_LENGTH = 255


class FlaggedReview(NamedTuple):
    review: Review
    flag_count: int

    def to_dict(self):
        return {"review": self.review.to_dict(), "flag_count": self.flag_count}


def auto_hide_threshold() -> int:
    return int(current_app.config.get("AUTO_HIDE_THRESHOLD", DEFAULT_AUTO_HIDE_THRESHOLD))


def count_flags(review_id: int, session=None) -> int:
    session = session or db.session
    stmt = select(func.count()).select_from(ContentFlag).where(ContentFlag.review_id == review_id)
    return session.execute(stmt).scalar_one()


def _validate_reason(reason) -> None:
    if not isinstance(reason, str) or not reason.strip():
        raise InvalidArgument("Flag reason cannot be blank.")
    if len(reason) > REASON_MAX_LENGTH:
        raise InvalidArgument(f"Flag reason cannot exceed {REASON_MAX_LENGTH} characters.")


def flag_review(review_id: int, reporter_id: int, reason: str, threshold: Optional[int] = None) -> ContentFlag:
    """
    Record reporter_id's flag against a review and auto-hide the review when
    the flag count reaches the threshold.

    The review row is locked for the whole call, so concurrent flaggers of the
    same review run one after the other and each counts every earlier flag.
    """
    if threshold is None:
        threshold = auto_hide_threshold()

    already = f"User has already flagged this review: {reporter_id}"
    try:
        with atomic() as session:
            if session.get(User, reporter_id) is None:
                raise NotFound(f"Reporter User not found with id: {reporter_id}")
            review = session.execute(
                select(Review).where(Review.id == review_id).with_for_update()
            ).scalar_one_or_none()
            if review is None:
                raise NotFound(f"Review not found with id: {review_id}")

            if session.get(ContentFlag, (reporter_id, review_id)) is not None:
                raise Conflict(already, ALREADY_FLAGGED)
            if review.user_id == reporter_id:
                raise InvalidState("Users cannot flag their own reviews.", SELF_FLAG)
            _validate_reason(reason)

            flag = ContentFlag(reporter_user_id=reporter_id, review_id=review_id, flag_reason=reason)
            session.add(flag)
            session.flush()

            flag_count = count_flags(review_id, session)
            if flag_count >= threshold and not review.hidden:
                review.hidden = True
                log.info("Review %s auto-hidden after %s flags (threshold %s)", review_id, flag_count, threshold)
    except IntegrityError as exc:
        # Primary key (reporter, review) rejected a concurrent duplicate
        raise Conflict(already, ALREADY_FLAGGED) from exc

    log.info("User %s flagged review %s (%s flags)", reporter_id, review_id, flag_count)
    return flag


def get_heavily_flagged_reviews(min_flags: int) -> List[FlaggedReview]:
    """Reviews with at least min_flags flags, most flagged first, then by id."""
    flag_count = func.count(ContentFlag.review_id)
    stmt = (
        select(Review, flag_count.label("flag_count"))
        .outerjoin(ContentFlag, ContentFlag.review_id == Review.id)
        .group_by(Review.id)
        .having(flag_count >= min_flags)
        .order_by(flag_count.desc(), Review.id.asc())
    )
    return [FlaggedReview(review, int(count)) for review, count in db.session.execute(stmt).all()]
