from datetime import datetime, timedelta
from itertools import count

import pytest
from sqlalchemy import select

from film_catalog import create_app
from film_catalog.config import TestingConfig
from film_catalog.extensions import db
from film_catalog.models import (
    ROLE_ADMIN,
    ROLE_USER,
    Genre,
    Movie,
    Role,
    User,
    UserFavorite,
    UserWatched,
)


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def ctx(app):
    """Service tests run inside one app context, sharing its session."""
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


class Factory:
    """Builds rows directly, bypassing the services under test."""

    def __init__(self):
        self._clock = count()
        self._base = datetime(2024, 1, 1, 12, 0, 0)

    def _tick(self):
        return self._base + timedelta(minutes=next(self._clock))

    def user(self, username, password="secret", admin=False):
        names = [ROLE_USER, ROLE_ADMIN] if admin else [ROLE_USER]
        roles = list(db.session.execute(select(Role).where(Role.name.in_(names))).scalars())
        user = User(username=username, name=username.title())
        user.set_password(password)
        user.roles = roles
        db.session.add(user)
        db.session.commit()
        return user

    def genre(self, name):
        genre = db.session.execute(select(Genre).filter_by(name=name)).scalar_one_or_none()
        if genre is None:
            genre = Genre(name=name)
            db.session.add(genre)
            db.session.commit()
        return genre

    def movie(self, title, genres=(), year=2000):
        movie = Movie(title=title, year=year)
        movie.genres = [self.genre(name) for name in genres]
        db.session.add(movie)
        db.session.commit()
        return movie

    def watched(self, user, movie):
        record = UserWatched(user_id=user.id, movie_id=movie.id, watched_at=self._tick())
        db.session.add(record)
        db.session.commit()
        return record

    def favorite(self, user, movie):
        favorite = UserFavorite(user_id=user.id, movie_id=movie.id, created_at=self._tick())
        db.session.add(favorite)
        db.session.commit()
        return favorite


@pytest.fixture
def make():
    return Factory()


SCORES = {
    "direction_score": 4,
    "screenplay_score": 3,
    "cinematography_score": 5,
    "general_score": 5,
}


@pytest.fixture
def scores():
    return dict(SCORES)


@pytest.fixture
def login(client):
    def _login(username, password="secret"):
        client.post("/auth/logout")
        resp = client.post("/auth/login", json={"username": username, "password": password})
        assert resp.status_code == 200, resp.get_json()
        return resp.get_json()

    return _login
