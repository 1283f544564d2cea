"""
Model: Property

A listing is addressed by its external string `id` (e.g. PROP1002);
`pk` is the store-internal key used by foreign keys.
Amenities and tags are stored as child rows so that containment
filters stay portable across SQL backends.
"""

from sqlalchemy.ext.associationproxy import association_proxy

from ..db import db
from ..utils import now_utc, isoformat


class PropertyAmenity(db.Model):
    __tablename__ = "property_amenity"

    id = db.Column(db.Integer, primary_key=True)
    property_pk = db.Column(db.Integer, db.ForeignKey("property.pk", ondelete="CASCADE"), nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False, index=True)

    def __init__(self, name):
        self.name = name


class PropertyTag(db.Model):
    __tablename__ = "property_tag"

    id = db.Column(db.Integer, primary_key=True)
    property_pk = db.Column(db.Integer, db.ForeignKey("property.pk", ondelete="CASCADE"), nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False, index=True)

    def __init__(self, name):
        self.name = name


class Property(db.Model):
    __tablename__ = "property"

    pk = db.Column(db.Integer, primary_key=True)
    id = db.Column(db.String(64), unique=True, nullable=False, index=True)

    title = db.Column(db.String(255), nullable=False)
    type = db.Column(db.String(100), nullable=False, index=True)
    price = db.Column(db.Float, nullable=False, index=True)
    state = db.Column(db.String(100), nullable=False, index=True)
    city = db.Column(db.String(100), nullable=False, index=True)
    area_sq_ft = db.Column(db.Float, nullable=False)
    bedrooms = db.Column(db.Integer, nullable=False)
    bathrooms = db.Column(db.Integer, nullable=False)
    furnished = db.Column(db.String(50), nullable=False)
    available_from = db.Column(db.Date, nullable=False)
    listed_by = db.Column(db.String(100), nullable=False)
    color_theme = db.Column(db.String(50), nullable=False)
    rating = db.Column(db.Float, nullable=False, default=0)
    is_verified = db.Column(db.Boolean, nullable=False, default=False)
    listing_type = db.Column(db.String(50), nullable=False)

    created_by = db.Column(db.Integer, db.ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = db.Column(db.DateTime(timezone=True), default=now_utc)
    updated_at = db.Column(db.DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    creator = db.relationship("User", lazy="joined", backref=db.backref("properties", lazy=True))
    amenity_rows = db.relationship(
        "PropertyAmenity",
        lazy="selectin",
        order_by="PropertyAmenity.id",
        cascade="all, delete-orphan",
    )
    tag_rows = db.relationship(
        "PropertyTag",
        lazy="selectin",
        order_by="PropertyTag.id",
        cascade="all, delete-orphan",
    )

    amenities = association_proxy("amenity_rows", "name")
    tags = association_proxy("tag_rows", "name")

    __table_args__ = (
        db.CheckConstraint("rating >= 0 AND rating <= 5", name="ck_property_rating_range"),
        db.CheckConstraint("price >= 0", name="ck_property_price_positive"),
        db.Index("idx_property_state_city", "state", "city"),
    )

    def to_dict(self, fields=None):
        """
        Serialize to the public camelCase representation.

        `fields` restricts the output to a projection (used by favorites).
        """
        data = {
            "id": self.id,
            "title": self.title,
            "type": self.type,
            "price": self.price,
            "state": self.state,
            "city": self.city,
            "areaSqFt": self.area_sq_ft,
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "amenities": list(self.amenities),
            "furnished": self.furnished,
            "availableFrom": isoformat(self.available_from),
            "listedBy": self.listed_by,
            "tags": list(self.tags),
            "colorTheme": self.color_theme,
            "rating": self.rating,
            "isVerified": self.is_verified,
            "listingType": self.listing_type,
            "createdBy": self.creator.to_creator_dict() if self.creator else None,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
        if fields is not None:
            return {k: data[k] for k in fields if k in data}
        return data

    def __repr__(self):
        return f"<Property(id={self.id}, city={self.city}, price={self.price})>"
