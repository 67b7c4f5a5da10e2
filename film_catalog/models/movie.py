from datetime import datetime
from . import db


movie_genres = db.Table(
    "movie_genres",
    db.Column("movie_id", db.Integer, db.ForeignKey("movies.id", ondelete="CASCADE"), primary_key=True),
    db.Column("genre_id", db.Integer, db.ForeignKey("genres.id", ondelete="CASCADE"), primary_key=True),
)


class Genre(db.Model):
    __tablename__ = "genres"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), unique=True, nullable=False)

    def to_dict(self):
        return {"id": self.id, "name": self.name}

    def __repr__(self):
        return f"<Genre {self.name}>"


class Movie(db.Model):
    __tablename__ = "movies"

    id = db.Column(db.Integer, primary_key=True)
    tmdb_id = db.Column(db.Integer, unique=True, nullable=True)
    title = db.Column(db.String(255), nullable=False)
    original_title = db.Column(db.String(255))
    year = db.Column(db.Integer)
    poster_path = db.Column(db.String(255))
    overview = db.Column(db.Text)
    runtime = db.Column(db.Integer)
    added_at = db.Column(db.DateTime, default=datetime.utcnow)

    added_by = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    # Ordered so genre frequency ties resolve the same way on every read
    genres = db.relationship("Genre", secondary=movie_genres, order_by="Genre.id", lazy="selectin")

    def to_dict(self):
        return {
            "id": self.id,
            "tmdb_id": self.tmdb_id,
            "title": self.title,
            "original_title": self.original_title,
            "year": self.year,
            "poster_path": self.poster_path,
            "overview": self.overview,
            "runtime": self.runtime,
            "genres": [g.to_dict() for g in self.genres],
        }

    def __repr__(self):
        return f"<Movie {self.title} ({self.year})>"
