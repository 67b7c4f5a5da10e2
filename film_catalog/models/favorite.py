from datetime import datetime
from . import db


class UserFavorite(db.Model):
    __tablename__ = "user_favorites"

    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    movie_id = db.Column(db.Integer, db.ForeignKey("movies.id", ondelete="CASCADE"), primary_key=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    movie = db.relationship("Movie", viewonly=True)

    def __repr__(self):
        return f"<UserFavorite user_id={self.user_id} movie_id={self.movie_id}>"
