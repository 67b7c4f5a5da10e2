from datetime import datetime
from . import db


class ContentFlag(db.Model):
    """A community report against a review. The primary key makes it one flag per reporter per review."""

    __tablename__ = "content_flags"

    reporter_user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    review_id = db.Column(db.Integer, db.ForeignKey("reviews.id", ondelete="CASCADE"), primary_key=True, index=True)
    flag_reason = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    reporter = db.relationship("User", viewonly=True)

    def to_dict(self):
        return {
            "review_id": self.review_id,
            "reporter_user_id": self.reporter_user_id,
            "reporter_username": self.reporter.username if self.reporter else None,
            "flag_reason": self.flag_reason,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<ContentFlag reporter={self.reporter_user_id} review_id={self.review_id}>"
