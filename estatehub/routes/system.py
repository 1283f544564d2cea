"""
System Routes - health and cache inspection
"""

from flask import Blueprint

from .. import redis_cache
from ..api_responses import success_response
from ..constants import BUILD_VERSION
from ..db import check_db

system_bp = Blueprint("system", __name__, url_prefix="/api")


@system_bp.route("/health")
def health():
    database_ok = check_db()
    data = {
        "status": "healthy" if database_ok else "degraded",
        "database": "connected" if database_ok else "unavailable",
        "cache": "enabled" if redis_cache.is_cache_enabled() else "disabled",
        "version": BUILD_VERSION,
    }
    return success_response(data, status_code=200 if database_ok else 503)


@system_bp.route("/cache/info")
def cache_info():
    return success_response(redis_cache.get_cache_info())
