"""
Model: Favorite
"""

from ..db import db
from ..utils import now_utc, isoformat
from ..constants import FAVORITE_PROPERTY_FIELDS


class Favorite(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    property_pk = db.Column(db.Integer, db.ForeignKey("property.pk", ondelete="CASCADE"), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=now_utc)

    property = db.relationship(
        "Property",
        lazy="joined",
        backref=db.backref("favorites", lazy=True, cascade="all, delete-orphan"),
    )

    __table_args__ = (
        # A user can't favorite the same property twice
        db.UniqueConstraint("user_id", "property_pk", name="uq_favorite_user_property"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "user": self.user_id,
            "property": self.property.to_dict(fields=FAVORITE_PROPERTY_FIELDS) if self.property else None,
            "createdAt": isoformat(self.created_at),
        }
