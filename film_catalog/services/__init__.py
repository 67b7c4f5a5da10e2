from .cache import init_requests_cache
from . import catalog, favorites, flags, recommendations, reviews, statistics, tmdb, watched, watchlists

__all__ = [
    "init_requests_cache",
    "catalog",
    "favorites",
    "flags",
    "recommendations",
    "reviews",
    "statistics",
    "tmdb",
    "watched",
    "watchlists",
]
