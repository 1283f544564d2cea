import time

from flask import Response, request
from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST

# API Metrics
api_request_duration_seconds = Histogram(
    "estatehub_api_request_duration_seconds", "API request duration", ["endpoint", "method"]
)

api_requests_total = Counter("estatehub_api_requests_total", "Total API requests", ["endpoint", "method", "status_code"])

# Cache Metrics
cache_requests_total = Counter("estatehub_cache_requests_total", "Cache lookups", ["family", "result"])

cache_errors_total = Counter("estatehub_cache_errors_total", "Cache operations that failed and degraded", ["operation"])

cache_invalidations_total = Counter("estatehub_cache_invalidations_total", "Cache keys removed by invalidation", ["reason"])

# Store Metrics
db_properties_total = Gauge("estatehub_properties_total", "Total number of properties")
db_favorites_total = Gauge("estatehub_favorites_total", "Total number of favorites")


def cache_family(key):
    """Reduce a cache key to its family (list/detail/search) for metric labels"""
    parts = key.split(":")
    return parts[1] if len(parts) > 1 else parts[0]


def init_metrics(app):
    @app.route("/api/metrics")
    def metrics():
        update_db_metrics()
        return Response(generate_latest(), mimetype=CONTENT_TYPE_LATEST)

    @app.before_request
    def before_request():
        request.start_time = time.time()

    @app.after_request
    def after_request(response):
        duration = time.time() - getattr(request, "start_time", time.time())
        api_request_duration_seconds.labels(endpoint=request.endpoint or "unknown", method=request.method).observe(
            duration
        )
        api_requests_total.labels(
            endpoint=request.endpoint or "unknown", method=request.method, status_code=response.status_code
        ).inc()
        return response

    app.logger.info("Prometheus metrics initialized at /api/metrics")


def update_db_metrics():
    """Refresh row-count gauges; a failing store only leaves them stale"""
    from .db import db
    from .models import Property, Favorite

    try:
        db_properties_total.set(Property.query.count())
        db_favorites_total.set(Favorite.query.count())
    except Exception:
        db.session.rollback()
