"""
Genre-frequency recommendations.

A user's taste is the genre histogram over the movies they watched or
favorited; candidates are catalog movies sharing any of the top genres.
"""
import logging
from collections import Counter
from typing import Iterable, List, Union

from sqlalchemy import select

from ..errors import InvalidArgument
from ..extensions import db
from ..models import Genre, Movie, UserFavorite, UserWatched
from ..pagination import Page, paginate_select
from . import catalog

log = logging.getLogger(__name__)


def _history_movies(user_id: int) -> List[Movie]:
    """Watched movies then favorites, each movie once, in first-seen order."""
    watched_stmt = (
        select(Movie)
        .join(UserWatched, UserWatched.movie_id == Movie.id)
        .where(UserWatched.user_id == user_id)
        .order_by(UserWatched.watched_at, UserWatched.movie_id)
    )
    favorite_stmt = (
        select(Movie)
        .join(UserFavorite, UserFavorite.movie_id == Movie.id)
        .where(UserFavorite.user_id == user_id)
        .order_by(UserFavorite.created_at, UserFavorite.movie_id)
    )
    seen = set()
    movies = []
    for stmt in (watched_stmt, favorite_stmt):
        for movie in db.session.execute(stmt).scalars():
            if movie.id not in seen:
                seen.add(movie.id)
                movies.append(movie)
    return movies


def top_genres(user_id: int, limit: int) -> List[Genre]:
    """
    The `limit` most frequent genres across the user's history. Equal counts
    keep the order in which the genres were first seen.
    """
    catalog.get_user(user_id)
    if limit < 1:
        raise InvalidArgument("limit must be at least 1")

    frequency = Counter()
    genres = {}
    for movie in _history_movies(user_id):
        for genre in movie.genres:
            genres.setdefault(genre.id, genre)
            frequency[genre.id] += 1

    # most_common keeps insertion order among equal counts
    return [genres[genre_id] for genre_id, _ in frequency.most_common(limit)]


def recommend(genres: Iterable[Union[Genre, int]], page: int = 1, per_page: int = 10) -> Page:
    genre_ids = [g.id if isinstance(g, Genre) else int(g) for g in (genres or [])]
    if not genre_ids:
        raise InvalidArgument("Genres list cannot be null or empty.")

    # any() is an EXISTS, so each movie appears once however many genres match
    stmt = (
        select(Movie)
        .where(Movie.genres.any(Genre.id.in_(genre_ids)))
        .order_by(Movie.title, Movie.id)
    )
    return paginate_select(stmt, page, per_page)


def recommend_for_user(user_id: int, limit: int = 3, page: int = 1, per_page: int = 10) -> Page:
    genres = top_genres(user_id, limit)
    if not genres:
        log.info("User %s has no watch history; nothing to recommend", user_id)
        return Page([], page, per_page, 0)
    return recommend(genres, page, per_page)
