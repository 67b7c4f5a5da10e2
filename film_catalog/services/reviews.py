"""
Review lifecycle: one review per watch record, editable by its author,
removable by its author or an admin, hideable by moderation.

Every write runs in a single transaction. The watch record row is locked
while a review is created so that a concurrent unmark of the same movie
can't leave an orphaned review behind.
"""
import logging
from datetime import datetime
from typing import Dict, List, Mapping, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError

from ..errors import (
    ALREADY_REVIEWED,
    NOT_WATCHED,
    Forbidden,
    InvalidArgument,
    InvalidState,
    NotFound,
)
from ..extensions import atomic, db
from ..models import SCORE_FIELDS, SCORE_MAX, SCORE_MIN, ContentFlag, Movie, Review
from ..pagination import Page, paginate_select
from . import catalog, watched

log = logging.getLogger(__name__)

MAX_CONTENT_LENGTH = 5000


class ReviewListing:
    """Visible reviews for a subject, plus the ids (only) of the hidden ones."""

    def __init__(self, visible: Page, hidden_ids: List[int]):
        self.visible = visible
        self.hidden_ids = hidden_ids

    def to_dict(self):
        return {
            "visible_reviews": [r.to_dict() for r in self.visible.items],
            "hidden_review_ids": list(self.hidden_ids),
            "page": self.visible.page,
            "per_page": self.visible.per_page,
            "total": self.visible.total,
            "total_pages": self.visible.total_pages,
        }


def validate_content(content) -> str:
    if not isinstance(content, str) or not content.strip():
        raise InvalidArgument("Review content cannot be blank.")
    if len(content) > MAX_CONTENT_LENGTH:
        raise InvalidArgument(f"Review content cannot exceed {MAX_CONTENT_LENGTH} characters.")
    return content


def validate_scores(scores: Mapping) -> Dict[str, int]:
    """Every criterion must be present and an integer in SCORE_MIN..SCORE_MAX."""
    cleaned = {}
    for field in SCORE_FIELDS:
        value = scores.get(field) if scores else None
        label = field.replace("_", " ").capitalize()
        if value is None:
            raise InvalidArgument(f"{label} cannot be null.")
        # bool is an int subclass; true/false are not scores
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidArgument(f"{label} must be an integer.")
        if not SCORE_MIN <= value <= SCORE_MAX:
            raise InvalidArgument(f"{label} must be between {SCORE_MIN} and {SCORE_MAX}.")
        cleaned[field] = value
    return cleaned


def _lock_review(session, review_id: int) -> Review:
    review = session.execute(select(Review).where(Review.id == review_id).with_for_update()).scalar_one_or_none()
    if review is None:
        raise NotFound(f"Review not found with id: {review_id}")
    return review


def get_review(review_id: int) -> Review:
    review = db.session.get(Review, review_id)
    if review is None:
        raise NotFound(f"Review not found with id: {review_id}")
    return review


def create_review(user_id: int, movie_id: int, content: str, scores: Mapping) -> Review:
    catalog.get_user(user_id)
    catalog.get_movie(movie_id)
    content = validate_content(content)
    scores = validate_scores(scores)

    already = f"A review already exists for user {user_id} and movie {movie_id}"
    try:
        with atomic() as session:
            record = watched.lock_record(session, user_id, movie_id)
            if record is None:
                raise InvalidState(f"User has not watched this movie: {movie_id}", NOT_WATCHED)

            attached = session.execute(
                select(Review.id).where(Review.user_id == user_id, Review.movie_id == movie_id)
            ).scalar_one_or_none()
            if attached is not None:
                raise InvalidState(already, ALREADY_REVIEWED)

            review = Review(
                user_id=user_id,
                movie_id=movie_id,
                content=content,
                likes_count=0,
                hidden=False,
                **scores,
            )
            session.add(review)
            session.flush()
            review_id = review.id
    except IntegrityError as exc:
        # Either the foreign key lost its watch record to a concurrent unmark,
        # or unique (user_id, movie_id) caught a concurrent create
        if not watched.exists(user_id, movie_id):
            raise InvalidState(f"User has not watched this movie: {movie_id}", NOT_WATCHED) from exc
        raise InvalidState(already, ALREADY_REVIEWED) from exc

    log.info("Review %s created by user %s for movie %s", review_id, user_id, movie_id)
    return review


def update_review(review_id: int, caller_id: int, content: str, scores: Mapping) -> Review:
    content = validate_content(content)
    scores = validate_scores(scores)

    with atomic() as session:
        review = _lock_review(session, review_id)
        if review.user_id != caller_id:
            raise Forbidden(f"User is not authorized to update review {review_id}")
        review.content = content
        for field, value in scores.items():
            setattr(review, field, value)
        review.updated_at = datetime.utcnow()

    log.info("Review %s updated by user %s", review_id, caller_id)
    return review


def delete_review(review_id: int, caller_id: Optional[int] = None) -> None:
    """
    Detach and delete a review with its flags. Whether the caller may do
    this (owner or admin) is decided before calling.
    """
    with atomic() as session:
        review = _lock_review(session, review_id)
        session.execute(delete(ContentFlag).where(ContentFlag.review_id == review.id))
        session.delete(review)

    log.info("Review %s deleted by user %s", review_id, caller_id)


def like_review(review_id: int) -> Review:
    # No per-user de-duplication: every call counts
    with atomic() as session:
        review = _lock_review(session, review_id)
        review.likes_count = Review.likes_count + 1
        session.flush()
    return review


def toggle_hide_review(review_id: int, hide: bool) -> Review:
    """Admin override. The only way a hidden review becomes visible again."""
    with atomic() as session:
        review = _lock_review(session, review_id)
        review.hidden = bool(hide)

    log.info("Review %s %s by moderator", review_id, "hidden" if hide else "unhidden")
    return review


def _listing(condition, order_by, page: int, per_page: int) -> ReviewListing:
    visible_stmt = select(Review).where(condition, Review.hidden.is_(False)).order_by(*order_by)
    hidden_stmt = select(Review.id).where(condition, Review.hidden.is_(True)).order_by(Review.id)
    visible = paginate_select(visible_stmt, page, per_page)
    hidden_ids = list(db.session.execute(hidden_stmt).scalars())
    return ReviewListing(visible, hidden_ids)


def get_reviews_for_movie(movie_id: int, page: int = 1, per_page: int = 10) -> ReviewListing:
    catalog.get_movie(movie_id)
    return _listing(
        Review.movie_id == movie_id,
        (Review.likes_count.desc(), Review.id.asc()),
        page,
        per_page,
    )


def get_reviews_for_user(user_id: int, page: int = 1, per_page: int = 10) -> ReviewListing:
    catalog.get_user(user_id)
    return _listing(
        Review.user_id == user_id,
        (Review.created_at.asc(), Review.id.asc()),
        page,
        per_page,
    )


def top_rated_movies(page: int = 1, per_page: int = 10) -> Page:
    """Movies ranked by their best visible general score."""
    best = func.max(Review.general_score)
    stmt = (
        select(Movie)
        .join(Review, Review.movie_id == Movie.id)
        .where(Review.hidden.is_(False))
        .group_by(Movie.id)
        .order_by(best.desc(), Movie.id.asc())
    )
    return paginate_select(stmt, page, per_page)
