import sqlite3

import structlog
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine

logger = structlog.get_logger('db')

db = SQLAlchemy()


@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    """Enforce foreign keys on SQLite connections"""
    if not isinstance(dbapi_connection, sqlite3.Connection):
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def init_db(app):
    """Create the tables for every registered model"""
    from . import models  # noqa: F401

    with app.app_context():
        db.create_all()
        logger.info(f"Database initialized ({db.engine.url.get_backend_name()})")


def check_db():
    """Return True when the database answers a trivial query"""
    try:
        db.session.execute(db.text("SELECT 1"))
        return True
    except Exception as e:
        logger.warning(f"Database health check failed: {e}")
        db.session.rollback()
        return False
