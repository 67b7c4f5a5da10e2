import pytest
from sqlalchemy import delete, func, select, text
from sqlalchemy.exc import IntegrityError

from film_catalog.errors import ALREADY_WATCHED, Conflict, NotFound
from film_catalog.extensions import db
from film_catalog.models import ContentFlag, Review, UserWatched
from film_catalog.services import flags, reviews, watched


def test_mark_watched_creates_record(ctx, make):
    user = make.user("ana")
    movie = make.movie("Alien", ["Horror"])

    record = watched.mark_watched(user.id, movie.id)

    assert record.watched_at is not None
    assert watched.exists(user.id, movie.id)


def test_mark_watched_twice_conflicts(ctx, make):
    user = make.user("ana")
    movie = make.movie("Alien")
    watched.mark_watched(user.id, movie.id)

    with pytest.raises(Conflict) as exc:
        watched.mark_watched(user.id, movie.id)
    assert exc.value.reason == ALREADY_WATCHED
    count = db.session.execute(select(func.count()).select_from(UserWatched)).scalar_one()
    assert count == 1


def test_mark_watched_unknown_movie(ctx, make):
    user = make.user("ana")
    with pytest.raises(NotFound):
        watched.mark_watched(user.id, 999)


def test_unmark_missing_record_is_not_found(ctx, make):
    user = make.user("ana")
    movie = make.movie("Alien")
    with pytest.raises(NotFound):
        watched.unmark_watched(user.id, movie.id)


def test_unmark_cascades_review_and_flags(ctx, make, scores):
    author = make.user("ana")
    reporter = make.user("bia")
    movie = make.movie("Alien")
    make.watched(author, movie)
    review = reviews.create_review(author.id, movie.id, "Tense and great", scores)
    flags.flag_review(review.id, reporter.id, "spoilers in the first line")
    review_id = review.id

    watched.unmark_watched(author.id, movie.id)

    assert not watched.exists(author.id, movie.id)
    assert db.session.get(Review, review_id) is None
    assert db.session.execute(select(func.count()).select_from(ContentFlag)).scalar_one() == 0


def test_unmark_only_removes_own_review(ctx, make, scores):
    ana = make.user("ana")
    bia = make.user("bia")
    movie = make.movie("Alien")
    make.watched(ana, movie)
    make.watched(bia, movie)
    reviews.create_review(ana.id, movie.id, "Mine", scores)
    kept = reviews.create_review(bia.id, movie.id, "Also good", scores)

    watched.unmark_watched(ana.id, movie.id)

    assert db.session.get(Review, kept.id) is not None


def test_list_watched_in_watch_order(ctx, make):
    user = make.user("ana")
    first = make.movie("Alien")
    second = make.movie("Aliens")
    make.watched(user, first)
    make.watched(user, second)

    assert [r.movie_id for r in watched.list_watched(user.id)] == [first.id, second.id]


def test_sqlite_enforces_foreign_keys(ctx):
    assert db.session.execute(text("PRAGMA foreign_keys")).scalar() == 1


def test_database_refuses_review_without_watch_record(ctx, make, scores):
    user = make.user("ana")
    movie = make.movie("Alien")
    db.session.add(Review(user_id=user.id, movie_id=movie.id, content="orphan", likes_count=0, hidden=False, **scores))

    with pytest.raises(IntegrityError):
        db.session.commit()
    db.session.rollback()
    assert db.session.execute(select(func.count()).select_from(Review)).scalar_one() == 0


def test_deleting_watch_record_cascades_in_database(ctx, make, scores):
    user = make.user("ana")
    reporter = make.user("bia")
    movie = make.movie("Alien")
    make.watched(user, movie)
    review = reviews.create_review(user.id, movie.id, "In space no one can hear you scream", scores)
    flags.flag_review(review.id, reporter.id, "spoils the chestburster scene")

    db.session.execute(delete(UserWatched).where(UserWatched.user_id == user.id, UserWatched.movie_id == movie.id))
    db.session.commit()

    assert db.session.execute(select(func.count()).select_from(Review)).scalar_one() == 0
    assert db.session.execute(select(func.count()).select_from(ContentFlag)).scalar_one() == 0
