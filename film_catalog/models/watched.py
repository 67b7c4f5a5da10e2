from datetime import datetime
from . import db


class UserWatched(db.Model):
    """A user watched a movie. At most one row per (user, movie)."""

    __tablename__ = "user_watched"

    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    movie_id = db.Column(db.Integer, db.ForeignKey("movies.id", ondelete="CASCADE"), primary_key=True)
    watched_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    movie = db.relationship("Movie", viewonly=True)

    def to_dict(self):
        return {
            "user_id": self.user_id,
            "movie_id": self.movie_id,
            "watched_at": self.watched_at.isoformat() if self.watched_at else None,
        }

    def __repr__(self):
        return f"<UserWatched user_id={self.user_id} movie_id={self.movie_id}>"
