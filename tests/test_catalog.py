import pytest
import requests

from film_catalog.config import _normalize_db_url
from film_catalog.errors import Conflict, InvalidArgument, NotFound
from film_catalog.services import catalog, tmdb


class FakeResponse:
    def __init__(self, payload, status=200):
        self._payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self._payload


TMDB_HEAT = {
    "id": 949,
    "title": "Heat",
    "original_title": "Heat",
    "release_date": "1995-12-15",
    "overview": "Obsessive master thief...",
    "runtime": 170,
    "poster_path": "/heat.jpg",
    "genres": [{"id": 28, "name": "Action"}, {"id": 80, "name": "Crime"}],
}


def test_normalize_db_url():
    assert _normalize_db_url("postgres://u:p@h/db") == "postgresql+psycopg2://u:p@h/db"
    assert _normalize_db_url("sqlite:///x.db") == "sqlite:///x.db"


def test_create_movie_reuses_genres(ctx, make):
    make.genre("Action")

    movie = catalog.create_movie("Heat", ["Action", "Crime", "Action"], year=1995)

    assert [g.name for g in movie.genres] == ["Action", "Crime"]
    assert [g.name for g in catalog.list_genres()] == ["Action", "Crime"]


def test_create_movie_requires_title(ctx):
    with pytest.raises(InvalidArgument):
        catalog.create_movie("  ")


def test_create_genre_duplicate(ctx):
    catalog.create_genre("Noir")
    with pytest.raises(Conflict):
        catalog.create_genre("Noir")


def test_lookups(ctx, make):
    user = make.user("ana")
    movie = make.movie("Heat", ["Crime"])

    assert catalog.user_exists(user.id)
    assert not catalog.user_exists(404)
    assert catalog.movie_exists(movie.id)
    assert [g.name for g in catalog.genres_of(movie.id)] == ["Crime"]
    with pytest.raises(NotFound):
        catalog.get_movie(404)
    with pytest.raises(NotFound):
        catalog.owner_of(404)


def test_list_movies_filters_by_genre_name(ctx, make):
    make.movie("Heat", ["Crime"])
    make.movie("Up", ["Animation"])

    page = catalog.list_movies(1, 10, ["Crime", "Western"])

    assert [m.title for m in page.items] == ["Heat"]


def test_import_movie_from_tmdb(ctx, monkeypatch):
    calls = []

    def fake_get(url, headers=None, params=None, timeout=None):
        calls.append(url)
        return FakeResponse(TMDB_HEAT)

    monkeypatch.setattr(tmdb.requests, "get", fake_get)

    movie = catalog.import_movie(949)

    assert calls == [f"{tmdb.TMDB_API_BASE}/movie/949"]
    assert movie.tmdb_id == 949
    assert movie.year == 1995
    assert [g.name for g in movie.genres] == ["Action", "Crime"]

    with pytest.raises(Conflict):
        catalog.import_movie(949)


def test_import_movie_tmdb_failure(ctx, monkeypatch):
    monkeypatch.setattr(tmdb.requests, "get", lambda *a, **kw: FakeResponse({}, status=404))

    with pytest.raises(NotFound):
        catalog.import_movie(1)
