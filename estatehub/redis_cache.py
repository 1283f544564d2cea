"""
Redis Cache Module for EstateHub
Cache-aside layer in front of the database with graceful degradation:
any Redis failure is logged and behaves like a miss, never like an error.
"""

import json
from typing import Any, Dict, Optional

import structlog

from .constants import (
    CACHE_NAMESPACE,
    CACHE_KEY_PROPERTY_LIST,
    CACHE_PREFIX_PROPERTY_DETAIL,
    CACHE_PREFIX_PROPERTY_SEARCH,
)
from .metrics import cache_requests_total, cache_errors_total, cache_invalidations_total, cache_family

logger = structlog.get_logger('redis_cache')

redis_client = None
_cache_stats = {
    "hits": 0,
    "misses": 0,
    "sets": 0,
    "deletes": 0,
    "errors": 0,
}


def init_cache(url=None, client=None):
    """
    Initialize the Redis client.

    A pre-built `client` wins over `url`. A failed startup ping keeps the
    client: lookups degrade to misses until redis-py reconnects. Only a
    missing or unparseable URL disables the cache.
    """
    global redis_client

    redis_client = None

    if client is not None:
        redis_client = client
        logger.info("Redis cache initialized with provided client")
        return redis_client

    if not url:
        logger.warning("No Redis URL configured. Cache will be disabled.")
        return None

    try:
        import redis

        redis_client = redis.from_url(url, decode_responses=True, socket_timeout=2, socket_connect_timeout=2)
        try:
            redis_client.ping()
            logger.info(f"Redis cache initialized at {url}")
        except Exception as e:
            logger.warning(f"Redis cache initialized but ping failed: {e}. Lookups will miss until it is reachable.")
    except Exception as e:
        logger.warning(f"Redis cache initialization failed: {e}. Cache will be disabled.")

    return redis_client


def is_cache_enabled() -> bool:
    """Check if Redis cache is enabled and available"""
    return redis_client is not None


def get_cache_stats() -> Dict:
    """Get cache statistics (hits, misses, sets, deletes, errors)"""
    if redis_client:
        return {**_cache_stats}
    return {"status": "disabled"}


def reset_cache_stats() -> None:
    """Reset cache statistics"""
    for key in _cache_stats:
        _cache_stats[key] = 0


def _record_error(operation, key, error):
    _cache_stats["errors"] += 1
    cache_errors_total.labels(operation=operation).inc()
    logger.warning(f"Cache {operation} error for {key}: {error}")


def cache_get(key: str) -> Optional[str]:
    """
    Get a raw value from cache

    Returns:
        Cached string or None if absent, expired or Redis is unavailable
    """
    if not redis_client:
        return None
    try:
        value = redis_client.get(key)
    except Exception as e:
        _record_error("get", key, e)
        return None

    if value:
        _cache_stats["hits"] += 1
        cache_requests_total.labels(family=cache_family(key), result="hit").inc()
        logger.debug(f"Cache HIT: {key}")
        return value

    _cache_stats["misses"] += 1
    cache_requests_total.labels(family=cache_family(key), result="miss").inc()
    logger.debug(f"Cache MISS: {key}")
    return None


def cache_get_json(key: str) -> Any:
    """Get and decode a JSON value; undecodable entries are dropped and treated as a miss"""
    value = cache_get(key)
    if value is None:
        return None
    try:
        return json.loads(value)
    except (TypeError, ValueError):
        logger.warning(f"Discarding undecodable cache entry {key}")
        cache_delete(key)
        return None


def cache_set(key: str, value: Any, ttl: int = 300) -> bool:
    """
    Set a value in cache with TTL, overwriting any previous value

    Args:
        key: Cache key
        value: Value to cache (strings are stored as-is, anything else is JSON-encoded)
        ttl: Time to live in seconds

    Returns:
        True if set successfully, False otherwise
    """
    if not redis_client:
        return False
    try:
        if not isinstance(value, str):
            value = json.dumps(value)
        redis_client.setex(key, ttl, value)
        _cache_stats["sets"] += 1
        logger.debug(f"Cache SET: {key} (TTL: {ttl}s)")
        return True
    except Exception as e:
        _record_error("set", key, e)
        return False


def cache_delete(key: str) -> bool:
    """
    Delete a value from cache

    Returns:
        True if a key was removed, False otherwise
    """
    if not redis_client:
        return False
    try:
        result = redis_client.delete(key)
        if result > 0:
            _cache_stats["deletes"] += 1
            logger.debug(f"Cache DELETE: {key}")
        return result > 0
    except Exception as e:
        _record_error("delete", key, e)
        return False


def cache_delete_prefix(prefix: str) -> int:
    """
    Delete every key under a namespace prefix.

    Keys are enumerated with incremental SCAN rather than KEYS so large
    namespaces do not block Redis. Not atomic against concurrent writers.

    Returns:
        Number of keys deleted
    """
    if not redis_client:
        return 0
    try:
        keys = list(redis_client.scan_iter(match=f"{prefix}*", count=500))
        if not keys:
            return 0
        count = redis_client.delete(*keys)
        _cache_stats["deletes"] += count
        logger.info(f"Cache DELETE: {prefix}* ({count} keys)")
        return count
    except Exception as e:
        _record_error("delete_prefix", prefix, e)
        return 0


def property_detail_key(property_id):
    return f"{CACHE_PREFIX_PROPERTY_DETAIL}{property_id}"


def invalidate_property_cache(property_id, include_search=False):
    """
    Invalidate the cached views of one property after an update or delete.

    Removes the detail entry and the list entry. Search results are left to
    expire on their TTL unless `include_search` is set.
    """
    removed = 0
    if cache_delete(property_detail_key(property_id)):
        removed += 1
    if cache_delete(CACHE_KEY_PROPERTY_LIST):
        removed += 1
    if include_search:
        removed += cache_delete_prefix(CACHE_PREFIX_PROPERTY_SEARCH)
    if removed:
        cache_invalidations_total.labels(reason="property_write").inc(removed)
    return removed


def invalidate_all_property_caches():
    """Invalidate every property-namespaced entry (list, details and searches)"""
    removed = cache_delete_prefix(CACHE_NAMESPACE)
    if removed:
        cache_invalidations_total.labels(reason="property_create").inc(removed)
        logger.info(f"Invalidated {removed} property cache entries")
    return removed


def get_cache_info() -> Dict:
    """
    Get detailed cache information

    Returns:
        Dictionary with cache status, stats and property key count
    """
    if not redis_client:
        return {"status": "disabled", "error": "Redis not available"}

    try:
        key_count = sum(1 for _ in redis_client.scan_iter(match=f"{CACHE_NAMESPACE}*", count=500))
        return {
            "status": "enabled",
            "keys": key_count,
            "stats": get_cache_stats(),
        }
    except Exception as e:
        return {"status": "error", "error": str(e)}
