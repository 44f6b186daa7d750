"""
Database connection management.

Provides:
- Connection pooling for the admin config and log tables
- Direct, unpooled connections for connectivity checks
- Health check functionality
"""

import logging
import time
from contextlib import contextmanager
from typing import Any, Generator

import psycopg2
from psycopg2 import pool, Error
from psycopg2.extensions import connection as PgConnection, cursor as PgCursor

from catalog_admin.config.settings import get_settings, Settings
from catalog_admin.exceptions import ConfigurationError

logger: logging.Logger = logging.getLogger(__name__)

_connection_pool: pool.ThreadedConnectionPool | None = None
_test_pool_override: pool.ThreadedConnectionPool | None = None


def set_test_pool(test_pool: pool.ThreadedConnectionPool | None) -> None:
    """Set a test pool override for unit testing."""
    global _test_pool_override
    _test_pool_override = test_pool


def get_pool() -> pool.ThreadedConnectionPool:
    """Get or create the connection pool."""
    global _connection_pool

    if _test_pool_override is not None:
        return _test_pool_override

    if _connection_pool is None:
        settings: Settings = get_settings()
        _connection_pool = pool.ThreadedConnectionPool(
            minconn=settings.db_pool_min,
            maxconn=settings.db_pool_max,
            **settings.connection_kwargs(),
        )
        logger.info(
            "Database connection pool created (min=%d, max=%d)",
            settings.db_pool_min,
            settings.db_pool_max,
        )

    return _connection_pool


def close_pool() -> None:
    """Close all connections in the pool."""
    global _connection_pool

    if _connection_pool is not None:
        _connection_pool.closeall()
        _connection_pool = None
        logger.info("Connection pool closed")


@contextmanager
def get_connection(
    pool_instance: pool.ThreadedConnectionPool | None = None,
) -> Generator[PgConnection, None, None]:
    """Get a database connection from the given pool, or the shared one."""
    if pool_instance is None:
        pool_instance = get_pool()
    # types-psycopg2 stubs don't fully cover the pool module.
    conn: PgConnection = pool_instance.getconn()  # type: ignore[assignment]

    try:
        yield conn
        conn.commit()  # type: ignore[union-attr]
    except Exception:
        # Roll back on any error type before re-raising so the connection
        # goes back to the pool without an open transaction.
        conn.rollback()  # type: ignore[union-attr]
        raise
    finally:
        pool_instance.putconn(conn)  # type: ignore[arg-type]


def create_direct_connection(database: str | None = None) -> PgConnection:
    """
    Open a dedicated connection scoped to `database`, bypassing the pool.

    Autocommit is enabled so a failed statement does not abort the
    statements that follow it on the same connection.

    Raises:
        ConfigurationError: If the storage settings are incomplete
        psycopg2.OperationalError: If the connection fails
    """
    settings: Settings = get_settings()
    conn: PgConnection = psycopg2.connect(**settings.connection_kwargs(database))
    conn.autocommit = True
    return conn


@contextmanager
def timed_cursor(conn: PgConnection) -> Generator["TimedCursor", None, None]:
    """Context manager that logs query execution time."""
    with conn.cursor() as cur:
        yield TimedCursor(cur)


class TimedCursor:
    """Wrapper around cursor that logs query timing."""

    def __init__(self, cursor: PgCursor) -> None:
        self._cursor: PgCursor = cursor

    def execute(self, query: str, params: tuple[Any, ...] | None = None) -> None:
        start: float = time.perf_counter()
        self._cursor.execute(query, params)
        duration_ms: float = (time.perf_counter() - start) * 1000

        query_preview: str = " ".join(query.split())[:50]
        logger.debug("Query: %s... - %.2fms", query_preview, duration_ms)

    def fetchone(self) -> tuple[Any, ...] | None:
        return self._cursor.fetchone()  # type: ignore[no-any-return]

    def fetchall(self) -> list[tuple[Any, ...]]:
        return self._cursor.fetchall()  # type: ignore[no-any-return]


def check_database_health() -> bool:
    """Check if the admin storage database is reachable."""
    try:
        with get_connection() as conn:
            with timed_cursor(conn) as cur:
                cur.execute("SELECT 1")
        return True
    except (Error, OSError, ConfigurationError) as e:
        logger.error("Database health check failed: %s", e)
        return False
