import os
from datetime import timedelta

from dotenv import load_dotenv


def _normalize_db_url(url: str) -> str:
    """
    Normalize postgres:// to postgresql+psycopg2:// for SQLAlchemy.
    """
    if not url:
        return url
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg2://", 1)
    return url


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "on", "yes"}


class Config:
    # Load .env if present
    load_dotenv()

    SECRET_KEY = os.getenv("FLASK_SECRET_KEY", "dev-secret-key-change-me")
    SESSION_COOKIE_NAME = "film_catalog_session"
    PERMANENT_SESSION_LIFETIME = timedelta(days=30)

    # Database config
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///film_catalog.db")
    SQLALCHEMY_DATABASE_URI = _normalize_db_url(DATABASE_URL)
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Moderation
    AUTO_HIDE_THRESHOLD = _env_int("AUTO_HIDE_THRESHOLD", 10)
    DEFAULT_MIN_FLAGS = _env_int("MODERATION_MIN_FLAGS", 10)

    # Recommendations and paging
    TOP_GENRES_LIMIT = _env_int("TOP_GENRES_LIMIT", 3)
    DEFAULT_PAGE_SIZE = 10
    MAX_PAGE_SIZE = 50

    # TMDB keys, used only by the admin movie import
    TMDB_API_KEY = os.getenv("TMDB_API_KEY", "")
    TMDB_BEARER_TOKEN = os.getenv("TMDB_BEARER_TOKEN", "")
    HTTP_CACHE_ENABLED = _env_flag("HTTP_CACHE_ENABLED", True)

    # Seeded administrator account
    ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # JSON API only; CSRF stays on for any form posts
    WTF_CSRF_TIME_LIMIT = None


class DevelopmentConfig(Config):
    DEBUG = True
    ENV = "development"


class ProductionConfig(Config):
    DEBUG = False
    ENV = "production"


class TestingConfig(Config):
    TESTING = True
    DEBUG = False
    ENV = "testing"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    WTF_CSRF_ENABLED = False
    HTTP_CACHE_ENABLED = False
    AUTO_HIDE_THRESHOLD = 10
    ADMIN_USERNAME = "admin"
    ADMIN_PASSWORD = "admin"
    LOG_LEVEL = "WARNING"


def get_config():
    env = os.getenv("FLASK_ENV", "development").lower()
    if env == "production":
        return ProductionConfig
    if env == "testing":
        return TestingConfig
    return DevelopmentConfig
