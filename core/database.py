"""
core/database.py -- Process-wide SQLAlchemy engine handle.

One Engine (and therefore one connection pool) per process. get_engine()
creates it lazily on first call; dispose_engine() tears it down and is called
from the application lifespan on shutdown. Stores receive the engine
explicitly -- nothing else in the codebase calls create_engine() for the
application database.

SQLite specifics:
  check_same_thread=False because FastAPI runs sync route handlers in a
  thread pool, so a pooled connection may be used from a different thread
  than the one that opened it.

  WAL journal mode is enabled per connection (PRAGMAs are not inherited by
  new pooled connections).

Layer rule: core/ is the kernel. No imports from api/, web/, auth/, vendors/.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from core.config import get_settings

logger = logging.getLogger("vendorify.db")


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def build_engine(db_url: str) -> Engine:
    """Create a configured Engine for db_url.

    Exposed separately from get_engine() so tests and the CLI can build
    isolated engines without touching the process-wide handle.
    """
    connect_args: dict = {}
    if db_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    engine = create_engine(db_url, connect_args=connect_args)
    if db_url.startswith("sqlite"):
        event.listen(engine, "connect", _set_wal_mode)
    return engine


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """Return the process-wide Engine, creating it on first use."""
    url = get_settings().database_url
    logger.info("Creating database engine (%s)", url.split("://", 1)[0])
    return build_engine(url)


def dispose_engine() -> None:
    """Dispose the process-wide Engine if one was created.

    Safe to call more than once. A later get_engine() builds a fresh engine.
    """
    if get_engine.cache_info().currsize:
        get_engine().dispose()
        get_engine.cache_clear()
        logger.info("Database engine disposed")
