"""Repository for the admin key/value configuration table."""

from dataclasses import dataclass, replace
from typing import Any, Mapping, TypedDict

from psycopg2 import pool

from catalog_admin.config.settings import get_settings
from catalog_admin.db.connection import get_connection, timed_cursor

CONFIG_TABLE: str = "catalog_admin_config"

# field name -> storage key
CONFIG_KEYS: dict[str, str] = {
    "database": "database.name",
    "tables": "database.tables",
    "index_name": "search.indexName",
}

# JSON key -> field name
JSON_FIELDS: dict[str, str] = {
    "database": "database",
    "tables": "tables",
    "indexName": "index_name",
}


class AdminConfigResponse(TypedDict):
    database: str
    tables: str
    indexName: str


@dataclass(frozen=True)
class AdminConfig:
    database: str = ""
    tables: str = ""
    index_name: str = ""

    def to_dict(self) -> AdminConfigResponse:
        return AdminConfigResponse(
            database=self.database,
            tables=self.tables,
            indexName=self.index_name,
        )


def parse_config_update(payload: Mapping[str, Any]) -> dict[str, str]:
    """Pick the string-valued config fields out of a JSON payload, ignoring the rest."""
    updates: dict[str, str] = {}
    for json_key, field in JSON_FIELDS.items():
        value: Any = payload.get(json_key)
        if isinstance(value, str):
            updates[field] = value
    return updates


def apply_overrides(payload: Mapping[str, Any], base: AdminConfig) -> AdminConfig:
    """
    Overlay per-request test overrides on the stored config.

    Database and index names apply only when non-blank; the table list
    applies whenever it is a string, so "" clears it for this run.
    """
    database: Any = payload.get("database")
    tables: Any = payload.get("tables")
    index_name: Any = payload.get("indexName")

    return replace(
        base,
        database=database if isinstance(database, str) and database.strip() else base.database,
        tables=tables if isinstance(tables, str) else base.tables,
        index_name=index_name if isinstance(index_name, str) and index_name.strip() else base.index_name,
    )


class ConfigStore:
    """Key/value storage for the three admin settings."""

    def __init__(self, pool_instance: pool.ThreadedConnectionPool) -> None:
        self._pool: pool.ThreadedConnectionPool = pool_instance

    def _ensure_table(self) -> None:
        with get_connection(self._pool) as conn:
            with timed_cursor(conn) as cur:
                cur.execute(f"""
                    CREATE TABLE IF NOT EXISTS {CONFIG_TABLE} (
                        k VARCHAR(64) PRIMARY KEY,
                        v TEXT NOT NULL,
                        updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
                    )
                """)

    def get(self) -> AdminConfig:
        """Return the stored config, with defaults for any missing key."""
        self._ensure_table()
        with get_connection(self._pool) as conn:
            with timed_cursor(conn) as cur:
                cur.execute(f"SELECT k, v FROM {CONFIG_TABLE}")
                rows: list[tuple[Any, ...]] = cur.fetchall()

        values: dict[str, str] = {
            "database": get_settings().default_database,
            "tables": "",
            "index_name": "",
        }
        stored: dict[str, str] = {key: field for field, key in CONFIG_KEYS.items()}
        for key, value in rows:
            field: str | None = stored.get(key)
            if field is not None:
                values[field] = value
        return AdminConfig(**values)

    def merge(self, updates: Mapping[str, str]) -> AdminConfig:
        """Upsert only the provided fields and return the resulting config."""
        self._ensure_table()
        with get_connection(self._pool) as conn:
            with timed_cursor(conn) as cur:
                for field, value in updates.items():
                    key: str | None = CONFIG_KEYS.get(field)
                    if key is None or value is None:
                        continue
                    cur.execute(
                        f"""
                        INSERT INTO {CONFIG_TABLE} (k, v) VALUES (%s, %s)
                        ON CONFLICT (k) DO UPDATE SET v = EXCLUDED.v, updated_at = now()
                        """,
                        (key, value),
                    )
        return self.get()
