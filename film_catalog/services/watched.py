"""
Watch records: the fact that a user watched a movie, and the root every
review hangs from.
"""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from ..errors import ALREADY_WATCHED, Conflict, NotFound
from ..extensions import atomic, db
from ..models import ContentFlag, Review, UserWatched
from . import catalog

log = logging.getLogger(__name__)


def exists(user_id: int, movie_id: int) -> bool:
    return db.session.get(UserWatched, (user_id, movie_id)) is not None


def lock_record(session, user_id: int, movie_id: int) -> Optional[UserWatched]:
    """Load the watch record FOR UPDATE so create/delete on the same pair serialize."""
    stmt = (
        select(UserWatched)
        .where(UserWatched.user_id == user_id, UserWatched.movie_id == movie_id)
        .with_for_update()
    )
    return session.execute(stmt).scalar_one_or_none()


def mark_watched(user_id: int, movie_id: int) -> UserWatched:
    catalog.get_user(user_id)
    catalog.get_movie(movie_id)

    message = f"Movie with id {movie_id} is already marked as watched for user with id {user_id}"
    try:
        with atomic() as session:
            if session.get(UserWatched, (user_id, movie_id)) is not None:
                raise Conflict(message, ALREADY_WATCHED)
            record = UserWatched(user_id=user_id, movie_id=movie_id, watched_at=datetime.utcnow())
            session.add(record)
            session.flush()
    except IntegrityError as exc:
        # Lost the race against a concurrent mark for the same pair
        raise Conflict(message, ALREADY_WATCHED) from exc

    log.info("User %s marked movie %s as watched", user_id, movie_id)
    return record


def unmark_watched(user_id: int, movie_id: int) -> None:
    """
    Remove a watch record together with its review and that review's flags,
    deleted in that order inside one transaction.
    """
    with atomic() as session:
        record = lock_record(session, user_id, movie_id)
        if record is None:
            raise NotFound(f"Watched record not found for user {user_id} and movie {movie_id}")

        review = session.execute(
            select(Review).where(Review.user_id == user_id, Review.movie_id == movie_id).with_for_update()
        ).scalar_one_or_none()
        if review is not None:
            session.execute(delete(ContentFlag).where(ContentFlag.review_id == review.id))
            session.delete(review)
            session.flush()

        session.delete(record)

    log.info(
        "User %s unmarked movie %s%s",
        user_id,
        movie_id,
        " (review removed)" if review is not None else "",
    )


def list_watched(user_id: int) -> List[UserWatched]:
    catalog.get_user(user_id)
    stmt = (
        select(UserWatched)
        .where(UserWatched.user_id == user_id)
        .order_by(UserWatched.watched_at, UserWatched.movie_id)
    )
    return list(db.session.execute(stmt).scalars())
