"""
core/database.py -- The shared connection pool used by every store.

One Database is constructed at startup (api/main.py lifespan) and passed into
each repository's constructor. The SQLAlchemy Engine owns the pool: it
acquires a connection for each `with engine.connect()` block and returns it on
exit, so stores never hold a connection across requests. close() drains the
pool on shutdown.

SQLAlchemy provides a database-agnostic abstraction: swapping SQLite for
PostgreSQL is a connection string change, not a rewrite.

Usage:
    db = Database("sqlite:///./portfolio.db")
    projects = ProjectStore(db)
    users = UserStore(db)
    ...
    db.close()

Layer rule: no imports from api/, auth/, or portfolio/.
"""

from __future__ import annotations

import logging

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger("portfolio.store")


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


class Database:
    """Owns the Engine (and therefore the connection pool) for one process."""

    def __init__(self, db_url: str) -> None:
        self.url = db_url
        connect_args: dict = {}
        engine_kwargs: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        else:
            engine_kwargs["pool_pre_ping"] = True
        self.engine: Engine = create_engine(db_url, connect_args=connect_args, **engine_kwargs)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)

    def ping(self) -> bool:
        """Return True if a trivial query succeeds. Used by the health endpoint."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError:
            logger.warning("Database ping failed", exc_info=True)
            return False
        return True

    def close(self) -> None:
        self.engine.dispose()
