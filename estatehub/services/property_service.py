"""
Property Service - cache-aside reads and cache-invalidating writes

Reads (list/detail/search) look up Redis first and fall back to the
database, repopulating the cache on a miss. Writes check ownership,
apply the change and then drop the affected cache entries.
"""

import secrets

import structlog
from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .. import redis_cache
from ..constants import CACHE_KEY_PROPERTY_LIST, CACHE_TTL, PROPERTY_ID_PREFIX
from ..exceptions import AuthorizationException, ConflictException, DatabaseException, NotFoundException
from ..query_builder import build_property_search
from ..repositories.property_repository import PropertyRepository
from ..validation import validate_external_id, validate_property_payload

logger = structlog.get_logger('property_service')


def _ttl(name):
    return current_app.config.get("CACHE_TTL", CACHE_TTL).get(name, CACHE_TTL[name])


def _invalidate_search_on_write():
    return bool(current_app.config.get("INVALIDATE_SEARCH_ON_WRITE", False))


def _generate_property_id():
    while True:
        candidate = f"{PROPERTY_ID_PREFIX}{secrets.token_hex(4).upper()}"
        if PropertyRepository.get_by_external_id(candidate) is None:
            return candidate


def _load_owned(property_id, user, action):
    item = PropertyRepository.get_by_external_id(property_id)
    if item is None:
        raise NotFoundException("Property not found")
    if item.created_by != user.id:
        logger.warning(f"User {user.id} tried to {action} property {property_id} owned by {item.created_by}")
        raise AuthorizationException(f"Not authorized to {action} this property")
    return item


class PropertyService:
    """Property operations: cached reads, invalidating writes"""

    @staticmethod
    def list_properties():
        """Return (properties, from_cache) for the unfiltered listing"""
        cached = redis_cache.cache_get_json(CACHE_KEY_PROPERTY_LIST)
        if cached is not None:
            return cached, True

        properties = [item.to_dict() for item in PropertyRepository.get_all()]
        redis_cache.cache_set(CACHE_KEY_PROPERTY_LIST, properties, _ttl("property_list"))
        return properties, False

    @staticmethod
    def get_property(property_id):
        """Return (property, from_cache); a missing property is never cached"""
        key = redis_cache.property_detail_key(property_id)
        cached = redis_cache.cache_get_json(key)
        if cached is not None:
            return cached, True

        item = PropertyRepository.get_by_external_id(property_id)
        if item is None:
            raise NotFoundException("Property not found")

        data = item.to_dict()
        redis_cache.cache_set(key, data, _ttl("property_detail"))
        return data, False

    @staticmethod
    def search_properties(args):
        """Return (properties, from_cache) for a filtered search"""
        search = build_property_search(args)
        cached = redis_cache.cache_get_json(search.cache_key)
        if cached is not None:
            return cached, True

        properties = [item.to_dict() for item in PropertyRepository.search(search.filters)]
        redis_cache.cache_set(search.cache_key, properties, _ttl("property_search"))
        logger.debug(f"Search {search.params} matched {len(properties)} properties")
        return properties, False

    @staticmethod
    def create_property(user, data):
        """Create a listing owned by `user` and drop every property cache entry"""
        values = validate_property_payload(data)

        if data.get("id") is not None:
            property_id = validate_external_id(data["id"])
            if PropertyRepository.get_by_external_id(property_id) is not None:
                raise ConflictException(f"Property with id '{property_id}' already exists")
        else:
            property_id = _generate_property_id()

        try:
            item = PropertyRepository.create(id=property_id, created_by=user.id, **values)
        except IntegrityError as e:
            logger.warning(f"Integrity error creating property {property_id}: {e}")
            raise ConflictException(f"Property with id '{property_id}' already exists")
        except SQLAlchemyError as e:
            logger.error(f"Error creating property {property_id}: {e}")
            raise DatabaseException("Failed to create property")

        redis_cache.invalidate_all_property_caches()
        logger.info(f"Property {item.id} created by user {user.id}")
        return item.to_dict()

    @staticmethod
    def update_property(user, property_id, data):
        """Update a listing; only its owner may do so"""
        item = _load_owned(property_id, user, "update")
        values = validate_property_payload(data, partial=True)

        try:
            item = PropertyRepository.update(item, **values)
        except SQLAlchemyError as e:
            logger.error(f"Error updating property {property_id}: {e}")
            raise DatabaseException("Failed to update property")

        redis_cache.invalidate_property_cache(property_id, include_search=_invalidate_search_on_write())
        logger.info(f"Property {property_id} updated by user {user.id}")
        return item.to_dict()

    @staticmethod
    def delete_property(user, property_id):
        """Delete a listing; only its owner may do so"""
        item = _load_owned(property_id, user, "delete")

        try:
            PropertyRepository.delete(item)
        except SQLAlchemyError as e:
            logger.error(f"Error deleting property {property_id}: {e}")
            raise DatabaseException("Failed to delete property")

        redis_cache.invalidate_property_cache(property_id, include_search=_invalidate_search_on_write())
        logger.info(f"Property {property_id} deleted by user {user.id}")
        return {}
