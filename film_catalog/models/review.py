from datetime import datetime
from . import db


SCORE_MIN = 0
SCORE_MAX = 5
SCORE_FIELDS = ("direction_score", "screenplay_score", "cinematography_score", "general_score")


class Review(db.Model):
    """
    A scored review attached 1:1 to a UserWatched row.

    The (user_id, movie_id) pair is both the foreign key to the watch record
    and a unique key, so a watch record can never carry two reviews.
    """

    __tablename__ = "reviews"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, nullable=False)
    movie_id = db.Column(db.Integer, nullable=False)
    content = db.Column(db.Text, nullable=False)
    direction_score = db.Column(db.Integer, nullable=False, default=0)
    screenplay_score = db.Column(db.Integer, nullable=False, default=0)
    cinematography_score = db.Column(db.Integer, nullable=False, default=0)
    general_score = db.Column(db.Integer, nullable=False, default=0)
    likes_count = db.Column(db.Integer, nullable=False, default=0)
    hidden = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = db.relationship("User", primaryjoin="foreign(Review.user_id) == User.id", viewonly=True)
    movie = db.relationship("Movie", primaryjoin="foreign(Review.movie_id) == Movie.id", viewonly=True)

    __table_args__ = (
        db.ForeignKeyConstraint(
            ["user_id", "movie_id"],
            ["user_watched.user_id", "user_watched.movie_id"],
            ondelete="CASCADE",
            name="fk_review_user_watched",
        ),
        db.UniqueConstraint("user_id", "movie_id", name="uq_review_user_watched"),
        db.CheckConstraint(f"direction_score BETWEEN {SCORE_MIN} AND {SCORE_MAX}", name="ck_review_direction"),
        db.CheckConstraint(f"screenplay_score BETWEEN {SCORE_MIN} AND {SCORE_MAX}", name="ck_review_screenplay"),
        db.CheckConstraint(f"cinematography_score BETWEEN {SCORE_MIN} AND {SCORE_MAX}", name="ck_review_cinematography"),
        db.CheckConstraint(f"general_score BETWEEN {SCORE_MIN} AND {SCORE_MAX}", name="ck_review_general"),
        db.Index("ix_reviews_movie_id", "movie_id"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "username": self.user.username if self.user else None,
            "movie_id": self.movie_id,
            "movie_title": self.movie.title if self.movie else None,
            "content": self.content,
            "direction_score": self.direction_score,
            "screenplay_score": self.screenplay_score,
            "cinematography_score": self.cinematography_score,
            "general_score": self.general_score,
            "likes_count": self.likes_count,
            "hidden": self.hidden,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<Review id={self.id} user_id={self.user_id} movie_id={self.movie_id} hidden={self.hidden}>"
