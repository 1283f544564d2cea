"""
Favorite Service - user <-> property favorites

Properties are addressed by their public id. Duplicate favorites are
rejected by the database unique constraint, not by a prior lookup.
"""

import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..exceptions import ConflictException, DatabaseException, NotFoundException
from ..repositories.favorite_repository import FavoriteRepository
from ..repositories.property_repository import PropertyRepository

logger = structlog.get_logger('favorite_service')


def _resolve_property(property_id):
    item = PropertyRepository.get_by_external_id(property_id)
    if item is None:
        raise NotFoundException("Property not found")
    return item


class FavoriteService:
    """Favorite operations for the authenticated user"""

    @staticmethod
    def add_favorite(user, property_id):
        item = _resolve_property(property_id)
        try:
            favorite = FavoriteRepository.create(user_id=user.id, property_pk=item.pk)
        except IntegrityError:
            raise ConflictException("Property already in favorites")
        except SQLAlchemyError as e:
            logger.error(f"Error adding favorite {property_id} for user {user.id}: {e}")
            raise DatabaseException("Error adding to favorites")

        logger.info(f"User {user.id} favorited property {property_id}")
        return favorite.to_dict()

    @staticmethod
    def remove_favorite(user, property_id):
        item = _resolve_property(property_id)
        favorite = FavoriteRepository.get_by_user_and_property(user.id, item.pk)
        if favorite is None:
            raise NotFoundException("Favorite not found")

        try:
            FavoriteRepository.delete(favorite)
        except SQLAlchemyError as e:
            logger.error(f"Error removing favorite {property_id} for user {user.id}: {e}")
            raise DatabaseException("Error removing from favorites")

        logger.info(f"User {user.id} removed property {property_id} from favorites")

    @staticmethod
    def list_favorites(user):
        return [favorite.to_dict() for favorite in FavoriteRepository.get_all_by_user(user.id)]

    @staticmethod
    def is_favorite(user, property_id):
        """Presence check; an unknown property simply is not a favorite"""
        item = PropertyRepository.get_by_external_id(property_id)
        if item is None:
            return False
        return FavoriteRepository.get_by_user_and_property(user.id, item.pk) is not None
