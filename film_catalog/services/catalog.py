"""
Lookups into the user directory and the movie catalog, plus the small amount
of catalog maintenance the admin routes need.
"""
import logging
from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from ..errors import Conflict, InvalidArgument, NotFound
from ..extensions import atomic, db
from ..models import Genre, Movie, Review, User
from ..pagination import Page, paginate_select
from . import tmdb

log = logging.getLogger(__name__)


def get_user(user_id: int) -> User:
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFound(f"User not found with id: {user_id}")
    return user


def user_exists(user_id: int) -> bool:
    return db.session.get(User, user_id) is not None


def owner_of(review_id: int) -> int:
    owner_id = db.session.execute(select(Review.user_id).where(Review.id == review_id)).scalar_one_or_none()
    if owner_id is None:
        raise NotFound(f"Review not found with id: {review_id}")
    return owner_id


def get_movie(movie_id: int) -> Movie:
    movie = db.session.get(Movie, movie_id)
    if movie is None:
        raise NotFound(f"Movie not found with id: {movie_id}")
    return movie


def movie_exists(movie_id: int) -> bool:
    return db.session.get(Movie, movie_id) is not None


def genres_of(movie_id: int) -> List[Genre]:
    return list(get_movie(movie_id).genres)


def list_genres() -> List[Genre]:
    return list(db.session.execute(select(Genre).order_by(Genre.name)).scalars())


def get_genre(genre_id: int) -> Genre:
    genre = db.session.get(Genre, genre_id)
    if genre is None:
        raise NotFound(f"Genre not found with id: {genre_id}")
    return genre


def _get_or_create_genres(session, names: Iterable[str]) -> List[Genre]:
    genres = []
    for name in names:
        name = (name or "").strip()
        if not name:
            continue
        genre = session.execute(select(Genre).where(Genre.name == name)).scalar_one_or_none()
        if genre is None:
            genre = Genre(name=name)
            session.add(genre)
            session.flush()
        if genre not in genres:
            genres.append(genre)
    return genres


def create_genre(name: str) -> Genre:
    name = (name or "").strip()
    if not name:
        raise InvalidArgument("Genre name required")
    try:
        with atomic() as session:
            if session.execute(select(Genre).where(Genre.name == name)).scalar_one_or_none():
                raise Conflict(f"Genre '{name}' already exists.")
            genre = Genre(name=name)
            session.add(genre)
            session.flush()
    except IntegrityError as exc:
        raise Conflict(f"Genre '{name}' already exists.") from exc
    return genre


def create_movie(
    title: str,
    genre_names: Iterable[str] = (),
    year: Optional[int] = None,
    overview: Optional[str] = None,
    runtime: Optional[int] = None,
    tmdb_id: Optional[int] = None,
    original_title: Optional[str] = None,
    poster_path: Optional[str] = None,
    added_by: Optional[int] = None,
) -> Movie:
    title = (title or "").strip()
    if not title:
        raise InvalidArgument("Movie title required")
    try:
        with atomic() as session:
            if tmdb_id is not None:
                existing = session.execute(select(Movie).where(Movie.tmdb_id == tmdb_id)).scalar_one_or_none()
                if existing:
                    raise Conflict(f"Movie with tmdb_id {tmdb_id} is already in the catalog")
            movie = Movie(
                title=title,
                original_title=original_title,
                year=year,
                overview=overview,
                runtime=runtime,
                tmdb_id=tmdb_id,
                poster_path=poster_path,
                added_by=added_by,
            )
            movie.genres = _get_or_create_genres(session, genre_names)
            session.add(movie)
            session.flush()
    except IntegrityError as exc:
        raise Conflict(f"Movie with tmdb_id {tmdb_id} is already in the catalog") from exc
    log.info("Movie %s added to catalog (%s)", movie.id, title)
    return movie


def import_movie(tmdb_id: int, added_by: Optional[int] = None) -> Movie:
    """Fetch a movie from TMDB and add it, with its genres, to the catalog."""
    existing = db.session.execute(select(Movie).where(Movie.tmdb_id == tmdb_id)).scalar_one_or_none()
    if existing:
        raise Conflict(f"Movie with tmdb_id {tmdb_id} is already in the catalog")

    md = tmdb.movie_details(tmdb_id)
    if not md:
        raise NotFound(f"TMDB has no movie with id: {tmdb_id}")

    return create_movie(
        title=md.get("title") or "",
        genre_names=md.get("genres", []),
        year=md.get("year"),
        overview=md.get("overview"),
        runtime=md.get("runtime"),
        tmdb_id=md.get("tmdb_id") or tmdb_id,
        original_title=md.get("original_title"),
        poster_path=md.get("poster_path"),
        added_by=added_by,
    )


def list_movies(page: int, per_page: int, genre_names: Iterable[str] = ()) -> Page:
    stmt = select(Movie).order_by(Movie.title, Movie.id)
    genre_names = [g for g in genre_names if g]
    if genre_names:
        # Movies with any of the requested genres
        stmt = stmt.where(Movie.genres.any(Genre.name.in_(genre_names)))
    return paginate_select(stmt, page, per_page)
