"""
Watchlists: named lists of movies a user plans to watch.

Every operation is addressed through the owning user. A list that exists but
belongs to someone else is refused with Forbidden rather than hidden.
"""
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from ..errors import ALREADY_IN_WATCHLIST, Conflict, Forbidden, InvalidArgument, NotFound
from ..extensions import atomic, db
from ..models import Watchlist
from ..pagination import Page, paginate_select
from . import catalog

log = logging.getLogger(__name__)

NAME_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 1000


def _validate(name, description):
    if not isinstance(name, str) or not name.strip():
        raise InvalidArgument("Watchlist name cannot be blank.")
    if len(name) > NAME_MAX_LENGTH:
        raise InvalidArgument(f"Watchlist name cannot exceed {NAME_MAX_LENGTH} characters.")
    if description is not None:
        if not isinstance(description, str):
            raise InvalidArgument("Watchlist description must be text.")
        if len(description) > DESCRIPTION_MAX_LENGTH:
            raise InvalidArgument(f"Watchlist description cannot exceed {DESCRIPTION_MAX_LENGTH} characters.")
    return name.strip(), description


def _owned(session, user_id: int, watchlist_id: int, lock: bool = False) -> Watchlist:
    catalog.get_user(user_id)
    stmt = select(Watchlist).where(Watchlist.id == watchlist_id)
    if lock:
        stmt = stmt.with_for_update()
    watchlist = session.execute(stmt).scalar_one_or_none()
    if watchlist is None:
        raise NotFound(f"Watchlist not found with id: {watchlist_id}")
    if watchlist.user_id != user_id:
        raise Forbidden(f"Watchlist {watchlist_id} does not belong to user {user_id}")
    return watchlist


def create_watchlist(user_id: int, name: str, description: Optional[str] = None) -> Watchlist:
    name, description = _validate(name, description)
    with atomic() as session:
        catalog.get_user(user_id)
        watchlist = Watchlist(user_id=user_id, name=name, description=description)
        session.add(watchlist)
        session.flush()

    log.info("User %s created watchlist %s", user_id, watchlist.id)
    return watchlist


def list_watchlists(user_id: int, page: int = 1, per_page: int = 10) -> Page:
    catalog.get_user(user_id)
    stmt = select(Watchlist).where(Watchlist.user_id == user_id).order_by(Watchlist.id)
    return paginate_select(stmt, page, per_page)


def get_watchlist(user_id: int, watchlist_id: int) -> Watchlist:
    return _owned(db.session, user_id, watchlist_id)


def update_watchlist(user_id: int, watchlist_id: int, name: str, description: Optional[str] = None) -> Watchlist:
    name, description = _validate(name, description)
    with atomic() as session:
        watchlist = _owned(session, user_id, watchlist_id, lock=True)
        watchlist.name = name
        watchlist.description = description
    return watchlist


def delete_watchlist(user_id: int, watchlist_id: int) -> None:
    with atomic() as session:
        watchlist = _owned(session, user_id, watchlist_id, lock=True)
        session.delete(watchlist)
    log.info("User %s deleted watchlist %s", user_id, watchlist_id)


def add_movie(user_id: int, watchlist_id: int, movie_id: int) -> Watchlist:
    message = f"Movie with id {movie_id} is already in watchlist {watchlist_id}"
    try:
        with atomic() as session:
            watchlist = _owned(session, user_id, watchlist_id, lock=True)
            movie = catalog.get_movie(movie_id)
            if movie in watchlist.movies:
                raise Conflict(message, ALREADY_IN_WATCHLIST)
            watchlist.movies.append(movie)
            session.flush()
    except IntegrityError as exc:
        # Primary key (watchlist, movie) rejected a concurrent add
        raise Conflict(message, ALREADY_IN_WATCHLIST) from exc

    log.info("Movie %s added to watchlist %s", movie_id, watchlist_id)
    return watchlist


def remove_movie(user_id: int, watchlist_id: int, movie_id: int) -> Watchlist:
    with atomic() as session:
        watchlist = _owned(session, user_id, watchlist_id, lock=True)
        movie = catalog.get_movie(movie_id)
        if movie not in watchlist.movies:
            raise NotFound(f"Movie with id {movie_id} is not in watchlist {watchlist_id}")
        watchlist.movies.remove(movie)

    log.info("Movie %s removed from watchlist %s", movie_id, watchlist_id)
    return watchlist
