"""
Repository for Property database operations
"""

from sqlalchemy.exc import SQLAlchemyError

from ..db import db
from ..models.property import Property


class PropertyRepository:
    """Repository for Property database operations"""

    @staticmethod
    def get_all():
        """Get all Property records, newest first"""
        return Property.query.order_by(Property.created_at.desc(), Property.pk.desc()).all()

    @staticmethod
    def get_by_external_id(property_id):
        """Get Property by its public id (e.g. PROP1002)"""
        return Property.query.filter_by(id=property_id).first()

    @staticmethod
    def search(filters):
        """Get every Property matching all the given SQLAlchemy criteria"""
        query = Property.query
        if filters:
            query = query.filter(*filters)
        return query.order_by(Property.created_at.desc(), Property.pk.desc()).all()

    @staticmethod
    def create(**kwargs):
        """Create new Property record"""
        try:
            item = Property(**kwargs)
            db.session.add(item)
            db.session.commit()
            db.session.refresh(item)
            return item
        except SQLAlchemyError as e:
            db.session.rollback()
            raise e

    @staticmethod
    def update(item, **kwargs):
        """Apply changes to a loaded Property record"""
        try:
            for key, value in kwargs.items():
                if hasattr(item, key):
                    setattr(item, key, value)
            db.session.commit()
            db.session.refresh(item)
            return item
        except SQLAlchemyError as e:
            db.session.rollback()
            raise e

    @staticmethod
    def delete(item):
        """Delete a loaded Property record (favorites cascade)"""
        try:
            db.session.delete(item)
            db.session.commit()
            return True
        except SQLAlchemyError as e:
            db.session.rollback()
            raise e
