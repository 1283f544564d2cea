"""
Model: User
"""

from flask_login import UserMixin

from ..db import db
from ..utils import now_utc, isoformat


class User(UserMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=now_utc)

    def to_public_dict(self):
        """Profile fields safe to return to clients (never the password hash)"""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "createdAt": isoformat(self.created_at),
        }

    def to_creator_dict(self):
        return {"id": self.id, "name": self.name, "email": self.email}
