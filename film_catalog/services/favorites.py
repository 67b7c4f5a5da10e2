import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from ..errors import ALREADY_FAVORITE, Conflict, NotFound
from ..extensions import atomic, db
from ..models import UserFavorite
from . import catalog

log = logging.getLogger(__name__)


def add_favorite(user_id: int, movie_id: int) -> UserFavorite:
    catalog.get_user(user_id)
    catalog.get_movie(movie_id)

    message = f"Movie with id {movie_id} is already a favorite for user with id {user_id}"
    try:
        with atomic() as session:
            if session.get(UserFavorite, (user_id, movie_id)) is not None:
                raise Conflict(message, ALREADY_FAVORITE)
            favorite = UserFavorite(user_id=user_id, movie_id=movie_id)
            session.add(favorite)
            session.flush()
    except IntegrityError as exc:
        raise Conflict(message, ALREADY_FAVORITE) from exc

    log.info("User %s favorited movie %s", user_id, movie_id)
    return favorite


def remove_favorite(user_id: int, movie_id: int) -> None:
    with atomic() as session:
        favorite = session.get(UserFavorite, (user_id, movie_id))
        if favorite is None:
            raise NotFound(f"Favorite not found for user {user_id} and movie {movie_id}")
        session.delete(favorite)
    log.info("User %s removed movie %s from favorites", user_id, movie_id)


def list_favorites(user_id: int) -> List[UserFavorite]:
    catalog.get_user(user_id)
    stmt = (
        select(UserFavorite)
        .where(UserFavorite.user_id == user_id)
        .order_by(UserFavorite.created_at, UserFavorite.movie_id)
    )
    return list(db.session.execute(stmt).scalars())
