from ..extensions import db

from .user import User, Role, ROLE_USER, ROLE_ADMIN
from .movie import Movie, Genre, movie_genres
from .watched import UserWatched
from .favorite import UserFavorite
from .review import Review, SCORE_FIELDS, SCORE_MIN, SCORE_MAX
from .flag import ContentFlag
from .watchlist import Watchlist, watchlist_movies

__all__ = [
    "db",
    "User",
    "Role",
    "ROLE_USER",
    "ROLE_ADMIN",
    "Movie",
    "Genre",
    "movie_genres",
    "UserWatched",
    "UserFavorite",
    "Review",
    "SCORE_FIELDS",
    "SCORE_MIN",
    "SCORE_MAX",
    "ContentFlag",
    "Watchlist",
    "watchlist_movies",
]
