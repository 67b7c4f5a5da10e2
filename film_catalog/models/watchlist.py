from datetime import datetime
from . import db


watchlist_movies = db.Table(
    "watchlist_movies",
    db.Column("watchlist_id", db.Integer, db.ForeignKey("watchlists.id", ondelete="CASCADE"), primary_key=True),
    db.Column("movie_id", db.Integer, db.ForeignKey("movies.id", ondelete="CASCADE"), primary_key=True),
)


class Watchlist(db.Model):
    """A named list of movies a user means to watch. The owner never changes."""

    __tablename__ = "watchlists"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False, default="Watchlist")
    description = db.Column(db.String(1000))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    movies = db.relationship("Movie", secondary=watchlist_movies, order_by="Movie.id")

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "description": self.description,
            "movies": [m.to_dict() for m in self.movies],
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<Watchlist {self.id} '{self.name}' user_id={self.user_id}>"
