"""
Repository for Favorite database operations
"""

from sqlalchemy.exc import SQLAlchemyError

from ..db import db
from ..models.favorite import Favorite


class FavoriteRepository:
    """Repository for Favorite database operations"""

    @staticmethod
    def get_by_user_and_property(user_id, property_pk):
        """Get the Favorite linking a user and a property"""
        return Favorite.query.filter_by(user_id=user_id, property_pk=property_pk).first()

    @staticmethod
    def get_all_by_user(user_id):
        """Get all Favorite records for a user, newest first"""
        return Favorite.query.filter_by(user_id=user_id).order_by(Favorite.created_at.desc(), Favorite.id.desc()).all()

    @staticmethod
    def create(**kwargs):
        """Create new Favorite record; uniqueness is enforced by the database"""
        try:
            item = Favorite(**kwargs)
            db.session.add(item)
            db.session.commit()
            db.session.refresh(item)
            return item
        except SQLAlchemyError as e:
            db.session.rollback()
            raise e

    @staticmethod
    def delete(item):
        """Delete Favorite record"""
        try:
            db.session.delete(item)
            db.session.commit()
            return True
        except SQLAlchemyError as e:
            db.session.rollback()
            raise e

