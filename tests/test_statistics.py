import pytest

from film_catalog.errors import InvalidArgument, NotFound
from film_catalog.services import reviews, statistics


def test_zero_reviews_average_is_zero(ctx, make):
    user = make.user("ana")

    for criterion in ("direction", "screenplay", "cinematography", "general"):
        assert statistics.average_score(user.id, criterion) == 0
    assert statistics.count_reviews(user.id) == 0
    assert statistics.sum_likes(user.id) == 0
    assert statistics.average_weighted(user.id) == {
        "direction_average": 0.0,
        "screenplay_average": 0.0,
        "cinematography_average": 0.0,
        "general_average": 0.0,
    }


def test_aggregates_over_all_reviews(ctx, make):
    user = make.user("ana")
    first = make.movie("Heat")
    second = make.movie("Ronin")
    for movie in (first, second):
        make.watched(user, movie)
    r1 = reviews.create_review(
        user.id, first.id, "a",
        {"direction_score": 4, "screenplay_score": 2, "cinematography_score": 5, "general_score": 5},
    )
    r2 = reviews.create_review(
        user.id, second.id, "b",
        {"direction_score": 1, "screenplay_score": 3, "cinematography_score": 0, "general_score": 4},
    )
    reviews.like_review(r1.id)
    reviews.like_review(r1.id)
    reviews.like_review(r2.id)
    # Hidden reviews still count towards the author's statistics
    reviews.toggle_hide_review(r2.id, True)

    report = statistics.user_statistics(user.id)

    assert report["reviews_count"] == 2
    assert report["total_likes"] == 3
    assert report["direction_average"] == pytest.approx(2.5)
    assert report["screenplay_average"] == pytest.approx(2.5)
    assert report["cinematography_average"] == pytest.approx(2.5)
    assert report["general_average"] == pytest.approx(4.5)
    assert statistics.average_score(user.id, "general_score") == pytest.approx(4.5)


def test_unknown_criterion(ctx, make):
    user = make.user("ana")
    with pytest.raises(InvalidArgument):
        statistics.average_score(user.id, "soundtrack")


def test_report_for_unknown_user(ctx):
    with pytest.raises(NotFound):
        statistics.user_statistics(404)
    with pytest.raises(NotFound):
        statistics.average_weighted(404)
