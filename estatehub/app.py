"""
EstateHub - Property listing backend
Application factory and initialization
"""
import logging
import sys

import structlog
from flask import Flask

from . import redis_cache
from .auth import auth_blueprint, limiter, login_manager
from .constants import BUILD_VERSION, CACHE_TTL
from .db import db, init_db
from .exceptions import register_exception_handlers
from .metrics import init_metrics
from .routes.favorites import favorites_bp
from .routes.properties import properties_bp
from .routes.system import system_bp
from .settings import load_settings
from .utils import ColoredFormatter, FilterRemoveDateFromWerkzeugLogs

logger = structlog.get_logger('main')


def configure_logging(level="INFO", log_format="console"):
    """Route stdlib and structlog output through one colored stdout handler"""
    formatter = ColoredFormatter(
        '[%(asctime)s.%(msecs)03d] %(levelname)s (%(module)s) %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        handlers=[handler],
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if log_format == 'json' else structlog.dev.ConsoleRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Apply filter to hide date from http access logs
    logging.getLogger('werkzeug').addFilter(FilterRemoveDateFromWerkzeugLogs())


def create_app(config=None):
    """
    Application factory

    `config` overrides the values derived from settings.yaml and the
    environment (tests pass an in-memory database and a Redis double
    through REDIS_CLIENT).
    """
    settings = load_settings()
    configure_logging(settings["logging"]["level"], settings["logging"]["format"])

    app = Flask(__name__)
    app.config.update(
        SQLALCHEMY_DATABASE_URI=settings["database"]["url"],
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        SECRET_KEY=settings["auth"]["jwt_secret"],
        JWT_SECRET=settings["auth"]["jwt_secret"],
        JWT_ALGORITHM=settings["auth"]["jwt_algorithm"],
        JWT_EXPIRES_MINUTES=settings["auth"]["jwt_expires_minutes"],
        REDIS_URL=settings["redis"]["url"],
        REDIS_CLIENT=None,
        CACHE_TTL={**CACHE_TTL, **settings["cache"]["ttl"]},
        INVALIDATE_SEARCH_ON_WRITE=settings["cache"]["invalidate_search_on_write"],
        LOGIN_RATE_LIMIT=settings["ratelimit"]["login"],
        RATELIMIT_STORAGE_URI="memory://",
    )
    if config:
        app.config.update(config)

    # Initialize components
    db.init_app(app)
    login_manager.init_app(app)
    limiter.init_app(app)
    redis_cache.init_cache(url=app.config["REDIS_URL"], client=app.config["REDIS_CLIENT"])

    # Register exception handlers
    register_exception_handlers(app)

    # Register blueprints
    app.register_blueprint(auth_blueprint)
    app.register_blueprint(properties_bp)
    app.register_blueprint(favorites_bp)
    app.register_blueprint(system_bp)

    # Initialize metrics
    init_metrics(app)

    # Initialize database
    init_db(app)

    logger.info(f"EstateHub {BUILD_VERSION} ready")
    return app


if __name__ == '__main__':
    app = create_app()
    logger.info('Starting server on port 5000...')
    app.run(host="0.0.0.0", port=5000, threaded=True)
    logger.info('Shutting down server...')
