"""Repository for the append-only connectivity test log."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal, TypedDict

from psycopg2 import pool

from catalog_admin.db.connection import get_connection, timed_cursor

logger: logging.Logger = logging.getLogger(__name__)

LOG_TABLE: str = "catalog_admin_logs"
RECENT_LOGS_LIMIT: int = 10

LogScope = Literal["database", "search", "combined"]
LogLevel = Literal["info", "warn", "error"]

_LOGGING_LEVELS: dict[str, int] = {
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


class LogEntryResponse(TypedDict):
    id: int
    scope: str
    level: str
    message: str
    createdAt: str


@dataclass(frozen=True)
class LogEntry:
    id: int
    scope: LogScope
    level: LogLevel
    message: str
    created_at: datetime

    def to_dict(self) -> LogEntryResponse:
        return LogEntryResponse(
            id=self.id,
            scope=self.scope,
            level=self.level,
            message=self.message,
            createdAt=self.created_at.isoformat(),
        )


class LogStore:
    """Insert and read back test outcome entries."""

    def __init__(self, pool_instance: pool.ThreadedConnectionPool) -> None:
        self._pool: pool.ThreadedConnectionPool = pool_instance

    def _ensure_table(self) -> None:
        with get_connection(self._pool) as conn:
            with timed_cursor(conn) as cur:
                cur.execute(f"""
                    CREATE TABLE IF NOT EXISTS {LOG_TABLE} (
                        id BIGSERIAL PRIMARY KEY,
                        scope VARCHAR(32) NOT NULL,
                        level VARCHAR(16) NOT NULL,
                        message TEXT NOT NULL,
                        created_at TIMESTAMPTZ NOT NULL DEFAULT now()
                    )
                """)

    def append(self, scope: LogScope, level: LogLevel, message: str) -> None:
        self._ensure_table()
        with get_connection(self._pool) as conn:
            with timed_cursor(conn) as cur:
                cur.execute(
                    f"INSERT INTO {LOG_TABLE} (scope, level, message) VALUES (%s, %s, %s)",
                    (scope, level, message),
                )
        logger.log(_LOGGING_LEVELS[level], "[%s] %s", scope, message)

    def recent(self, limit: int = RECENT_LOGS_LIMIT) -> list[LogEntry]:
        """Latest `limit` entries, newest first, id breaking timestamp ties."""
        self._ensure_table()
        with get_connection(self._pool) as conn:
            with timed_cursor(conn) as cur:
                cur.execute(
                    f"""
                    SELECT id, scope, level, message, created_at
                    FROM {LOG_TABLE}
                    ORDER BY created_at DESC, id DESC
                    LIMIT %s
                    """,
                    (limit,),
                )
                rows: list[tuple[Any, ...]] = cur.fetchall()

        return [
            LogEntry(id=row[0], scope=row[1], level=row[2], message=row[3], created_at=row[4])
            for row in rows
        ]
