# WORKFLOW: Database engine and session management for dump loading.
# Used by: db/destination.py, tests
# Functions:
# 1. create_dump_engine() - Engine for a database URL, tuned for bulk loading on SQLite
# 2. get_session_factory() - Session factory bound to an engine
# 3. init_db() - Create (or drop and recreate) all tables
#
# Database lifecycle:
# Startup: create_dump_engine() -> init_db() -> seed data
# Loading: session per batch -> bulk insert -> commit
# Shutdown: indexes and deferred constraints -> engine.dispose()

from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from core.config import settings
import logging

logger = logging.getLogger(__name__)

SQLITE_BULK_PRAGMAS = [
    "PRAGMA synchronous=OFF",
    "PRAGMA journal_mode=OFF",
    "PRAGMA cache_size=10000",
    "PRAGMA temp_store=MEMORY",
    "PRAGMA foreign_keys=OFF",
]


def _apply_sqlite_bulk_pragmas(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    try:
        for pragma in SQLITE_BULK_PRAGMAS:
            cursor.execute(pragma)
    finally:
        cursor.close()


def create_dump_engine(database_url: Optional[str] = None, bulk_pragmas: Optional[bool] = None, **kwargs) -> Engine:
    """
    Create a database engine for loading a dump.

    Args:
        database_url: SQLAlchemy URL; defaults to settings.database_url
        bulk_pragmas: Apply SQLite bulk-load pragmas; defaults to settings.sqlite_bulk_pragmas
        **kwargs: Passed through to create_engine

    Returns:
        SQLAlchemy Engine
    """
    url = database_url or settings.database_url
    engine = create_engine(url, pool_pre_ping=True, **kwargs)

    if bulk_pragmas is None:
        bulk_pragmas = settings.sqlite_bulk_pragmas
    if engine.dialect.name == "sqlite" and bulk_pragmas:
        event.listen(engine, "connect", _apply_sqlite_bulk_pragmas)

    logger.info(f"Using {engine.dialect.name} database at {engine.url.render_as_string(hide_password=True)}")
    return engine


def get_session_factory(engine: Engine) -> sessionmaker:
    """Get a session factory bound to ``engine``."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine, replace: bool = False) -> None:
    """
    Create the dump tables.

    Args:
        engine: Target engine
        replace: Drop every existing dump table first
    """
    from db.models import Base

    try:
        if replace:
            Base.metadata.drop_all(bind=engine)
            logger.info("Existing tables dropped")
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully")

    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise
