"""
Connectivity check against the target PostgreSQL database.

Opens a dedicated connection, confirms it answers, then counts rows in
each requested table. A missing table is reported per table and does not
stop the remaining ones; a connection failure fails the whole check.
"""

import logging
import time
from typing import Callable

from psycopg2 import Error, sql
from psycopg2.extensions import connection as PgConnection

from catalog_admin.checks.models import CheckError, DatabaseCheckResult, TableCheck
from catalog_admin.db.connection import create_direct_connection, timed_cursor
from catalog_admin.db.repositories.logs import LogStore
from catalog_admin.exceptions import ConfigurationError

logger: logging.Logger = logging.getLogger(__name__)

Connector = Callable[[str | None], PgConnection]


def parse_table_list(raw: str) -> list[str]:
    """Split a comma-separated table list, dropping blanks and keeping order."""
    return [name.strip() for name in raw.split(",") if name.strip()]


def error_code(exc: BaseException) -> str:
    return getattr(exc, "pgcode", None) or getattr(exc, "code", None) or type(exc).__name__


def _elapsed_ms(start: float) -> int:
    return round((time.perf_counter() - start) * 1000)


def _check_table(conn: PgConnection, name: str) -> TableCheck:
    try:
        with conn.cursor() as cur:
            cur.execute(sql.SQL("SELECT COUNT(*) FROM {}").format(sql.Identifier(name)))
            row = cur.fetchone()
    except Error as e:
        return TableCheck(name=name, exists=False, message=str(e).strip())

    row_count: int | None = int(row[0]) if row is not None else None
    return TableCheck(name=name, exists=True, row_count=row_count)


def summarize(result: DatabaseCheckResult) -> str:
    if result.error is not None:
        return f"Database error: {result.error.message}"

    if result.tables:
        listing: str = ", ".join(
            f"{table.name}:{'ok' if table.exists else 'missing'}" for table in result.tables
        )
    else:
        listing = "no tables provided"
    label: str = "Database OK" if result.ok else "Database issues"
    return f"{label} in {result.duration_ms}ms ({listing})"


def run_database_check(
    database: str,
    tables: str,
    *,
    log_store: LogStore,
    log: bool = True,
    connect: Connector = create_direct_connection,
) -> DatabaseCheckResult:
    """
    Verify the database is reachable and every listed table can be counted.

    Args:
        database: Target database name, "" for the configured default
        tables: Comma-separated table names, "" to only test the connection
        log_store: Where the outcome is recorded
        log: Set False to skip recording (used by the combined run)
        connect: Opens the dedicated connection

    Returns:
        The check result; connection errors are captured, not raised.
    """
    table_names: list[str] = parse_table_list(tables)
    start: float = time.perf_counter()
    conn: PgConnection | None = None

    try:
        conn = connect(database or None)
        with timed_cursor(conn) as cur:
            cur.execute("SELECT 1")
            cur.fetchone()

        checks: list[TableCheck] = [_check_table(conn, name) for name in table_names]
        result = DatabaseCheckResult(
            ok=all(check.exists for check in checks),
            database=database,
            tables=checks,
            duration_ms=_elapsed_ms(start),
        )
    except (Error, OSError, ConfigurationError) as e:
        logger.warning("Database check failed for %r: %s", database or "<default>", e)
        result = DatabaseCheckResult(
            ok=False,
            database=database,
            tables=[],
            duration_ms=_elapsed_ms(start),
            error=CheckError(message=str(e).strip() or "Unknown database error", code=error_code(e)),
        )
    finally:
        if conn is not None:
            conn.close()

    if log:
        log_store.append("database", "info" if result.ok else "error", summarize(result))

    return result
