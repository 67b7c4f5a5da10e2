import pytest

from film_catalog.errors import InvalidArgument, NotFound
from film_catalog.services import recommendations


def test_top_genre_by_frequency(ctx, make):
    user = make.user("ana")
    make.watched(user, make.movie("Die Hard", ["Action"]))
    make.watched(user, make.movie("Heat", ["Action", "Drama"]))

    top = recommendations.top_genres(user.id, 1)

    assert [g.name for g in top] == ["Action"]


def test_ties_keep_first_seen_order(ctx, make):
    user = make.user("ana")
    # Drama is created (and seen) before Comedy
    make.watched(user, make.movie("Parasite", ["Drama", "Comedy"]))
    make.watched(user, make.movie("Amelie", ["Comedy", "Romance"]))
    make.watched(user, make.movie("Moonlight", ["Drama"]))

    top = recommendations.top_genres(user.id, 3)

    assert [g.name for g in top] == ["Drama", "Comedy", "Romance"]


def test_favorites_count_and_movies_are_counted_once(ctx, make):
    user = make.user("ana")
    alien = make.movie("Alien", ["Horror", "Sci-Fi"])
    make.watched(user, alien)
    make.favorite(user, alien)
    make.favorite(user, make.movie("Arrival", ["Sci-Fi"]))

    top = recommendations.top_genres(user.id, 2)

    assert [g.name for g in top] == ["Sci-Fi", "Horror"]


def test_top_genres_without_history(ctx, make):
    user = make.user("ana")
    assert recommendations.top_genres(user.id, 3) == []


def test_top_genres_unknown_user(ctx):
    with pytest.raises(NotFound):
        recommendations.top_genres(404, 3)


def test_recommend_matches_any_genre_once(ctx, make):
    action = make.genre("Action")
    drama = make.genre("Drama")
    heat = make.movie("Heat", ["Action", "Drama"])
    ronin = make.movie("Ronin", ["Action"])
    make.movie("Up", ["Animation"])

    page = recommendations.recommend([action, drama])

    assert [m.id for m in page.items] == [heat.id, ronin.id]
    assert page.total == 2


def test_recommend_accepts_ids_and_paginates(ctx, make):
    action = make.genre("Action")
    for title in ("A", "B", "C"):
        make.movie(title, ["Action"])

    page = recommendations.recommend([action.id], page=2, per_page=2)

    assert [m.title for m in page.items] == ["C"]
    assert page.total == 3
    assert page.total_pages == 2


def test_recommend_empty_genres(ctx):
    with pytest.raises(InvalidArgument):
        recommendations.recommend([])


def test_recommend_for_user(ctx, make):
    user = make.user("ana")
    make.watched(user, make.movie("Die Hard", ["Action"]))
    make.movie("Up", ["Animation"])

    page = recommendations.recommend_for_user(user.id, limit=1)

    assert [m.title for m in page.items] == ["Die Hard"]


def test_recommend_for_user_without_history_is_empty(ctx, make):
    user = make.user("ana")
    page = recommendations.recommend_for_user(user.id)
    assert page.items == [] and page.total == 0
