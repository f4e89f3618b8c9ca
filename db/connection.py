"""
db/connection.py
----------------
Manages the PostgreSQL connection pool.
Rows are read through RealDictCursor so repositories can map columns by
name, and JSONB sub-documents are written through `as_json`.
"""

import psycopg2
from psycopg2 import pool, extras
from config import DATABASE_URL
from utils.logger import get_logger

logger = get_logger(__name__)

_pool: pool.SimpleConnectionPool | None = None


def init_pool(min_conn: int = 1, max_conn: int = 5) -> None:
    """
    Open the shared connection pool (no-op when already open).

    Raises:
        psycopg2.OperationalError: If the database is unreachable.
    """
    global _pool
    if _pool is not None:
        return
    try:
        _pool = pool.SimpleConnectionPool(min_conn, max_conn, DATABASE_URL)
        logger.info(f"Database pool ready ({min_conn}-{max_conn} connections).")
    except psycopg2.OperationalError as e:
        logger.error(f"Could not connect to the database: {e}")
        raise


def get_connection():
    """
    Borrow a connection from the pool.

    Raises:
        RuntimeError: If `init_pool()` has not been called.
    """
    if _pool is None:
        raise RuntimeError("Database pool not initialized. Call init_pool() first.")
    return _pool.getconn()


def release_connection(conn) -> None:
    """Hand a borrowed connection back to the pool."""
    if _pool is not None:
        _pool.putconn(conn)


def dict_cursor(conn):
    """Open a cursor whose rows are dicts keyed by column name."""
    return conn.cursor(cursor_factory=extras.RealDictCursor)


def as_json(value):
    """Adapt a dict for a JSONB column; None stays SQL NULL."""
    return extras.Json(value) if value is not None else None


def close_pool() -> None:
    """Close every pooled connection."""
    global _pool
    if _pool is not None:
        _pool.closeall()
        _pool = None
        logger.info("Database pool closed.")
