"""
Repository for User database operations
"""

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from ..db import db
from ..models.user import User


class UserRepository:
    """Repository for User database operations"""

    @staticmethod
    def get_by_id(id):
        """Get User by ID"""
        return db.session.get(User, id)

    @staticmethod
    def get_by_email(email):
        """Get User by email, case-insensitive"""
        return User.query.filter(func.lower(User.email) == email.strip().lower()).first()

    @staticmethod
    def create(**kwargs):
        """Create new User record"""
        try:
            item = User(**kwargs)
            db.session.add(item)
            db.session.commit()
            db.session.refresh(item)
            return item
        except SQLAlchemyError as e:
            db.session.rollback()
            raise e
