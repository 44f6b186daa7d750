"""
Unit tests for the config and log repositories.

Runs against the in-memory fake pool from tests/fakes.py.
"""

from datetime import datetime, timedelta, timezone

import psycopg2
import pytest

from catalog_admin.db.repositories.config import (
    AdminConfig,
    ConfigStore,
    apply_overrides,
    parse_config_update,
)
from catalog_admin.db.repositories.logs import LogStore
from tests.fakes import RECENT_ORDER_CLAUSE, UPSERT_CLAUSE, FakePool, FakeStorage


@pytest.fixture
def config_store(fake_pool: FakePool) -> ConfigStore:
    return ConfigStore(fake_pool)  # type: ignore[arg-type]


class TestConfigStoreGet:

    def test_defaults_use_postgres_db(
        self, clean_env: None, monkeypatch: pytest.MonkeyPatch, config_store: ConfigStore
    ) -> None:
        monkeypatch.setenv("POSTGRES_DB", "catalog")

        assert config_store.get() == AdminConfig(database="catalog", tables="", index_name="")

    def test_defaults_without_env(self, clean_env: None, config_store: ConfigStore) -> None:
        assert config_store.get() == AdminConfig()

    def test_stored_values_override_defaults(
        self, clean_env: None, config_store: ConfigStore, storage: FakeStorage
    ) -> None:
        storage.config.update({"database.tables": "users", "search.indexName": "products"})

        config = config_store.get()

        assert config.tables == "users"
        assert config.index_name == "products"

    def test_unknown_keys_ignored(
        self, clean_env: None, config_store: ConfigStore, storage: FakeStorage
    ) -> None:
        storage.config["legacy.key"] = "x"

        assert config_store.get() == AdminConfig()

    def test_creates_table_first(self, clean_env: None, config_store: ConfigStore, storage: FakeStorage) -> None:
        config_store.get()

        assert storage.statements[0][0].startswith("CREATE TABLE IF NOT EXISTS catalog_admin_config")


class TestConfigStoreMerge:

    def test_omitted_fields_unchanged(
        self, clean_env: None, config_store: ConfigStore, storage: FakeStorage
    ) -> None:
        config_store.merge({"database": "shop", "tables": "users", "index_name": "products"})

        config = config_store.merge({"tables": "orders"})

        assert config == AdminConfig(database="shop", tables="orders", index_name="products")

    def test_overwrites_existing_key_with_upsert(
        self, clean_env: None, config_store: ConfigStore, storage: FakeStorage
    ) -> None:
        storage.config["database.tables"] = "users"

        config = config_store.merge({"tables": "orders"})

        assert config.tables == "orders"
        inserts = [sql for sql, _ in storage.statements if sql.startswith("INSERT INTO catalog_admin_config")]
        assert len(inserts) == 1
        assert UPSERT_CLAUSE in inserts[0]

    def test_empty_string_is_stored(self, clean_env: None, config_store: ConfigStore) -> None:
        config_store.merge({"tables": "users"})

        assert config_store.merge({"tables": ""}).tables == ""

    def test_empty_update_is_noop(self, clean_env: None, config_store: ConfigStore, storage: FakeStorage) -> None:
        config = config_store.merge({})

        assert config == AdminConfig()
        assert storage.config == {}

    def test_uses_storage_keys(self, clean_env: None, config_store: ConfigStore, storage: FakeStorage) -> None:
        config_store.merge({"database": "shop", "index_name": "products", "bogus": "x"})

        assert storage.config == {"database.name": "shop", "search.indexName": "products"}

    def test_storage_error_propagates_and_rolls_back(
        self, config_store: ConfigStore, storage: FakeStorage, fake_pool: FakePool
    ) -> None:
        storage.fail = True

        with pytest.raises(psycopg2.OperationalError):
            config_store.merge({"tables": "users"})

        assert storage.rollbacks == 1
        assert fake_pool.checked_out == 0


class TestConfigPayloads:

    def test_update_keeps_only_string_fields(self) -> None:
        payload = {"database": "shop", "tables": 3, "indexName": None, "other": "x"}

        assert parse_config_update(payload) == {"database": "shop"}

    def test_update_maps_index_name(self) -> None:
        assert parse_config_update({"indexName": "products"}) == {"index_name": "products"}

    def test_overrides_ignore_blank_names(self) -> None:
        base = AdminConfig(database="shop", tables="users", index_name="products")

        config = apply_overrides({"database": "  ", "indexName": "", "tables": ""}, base)

        assert config == AdminConfig(database="shop", tables="", index_name="products")

    def test_overrides_apply(self) -> None:
        base = AdminConfig(database="shop", tables="users", index_name="products")

        config = apply_overrides({"database": "other", "tables": "a,b", "indexName": "idx"}, base)

        assert config == AdminConfig(database="other", tables="a,b", index_name="idx")

    def test_overrides_ignore_wrong_types(self) -> None:
        base = AdminConfig(database="shop", tables="users", index_name="products")

        assert apply_overrides({"database": 1, "tables": ["x"], "indexName": {}}, base) == base


class TestLogStore:

    def test_append_then_recent_one(self, log_store: LogStore) -> None:
        log_store.append("search", "error", "Search credentials are not configured.")

        entries = log_store.recent(1)

        assert len(entries) == 1
        assert (entries[0].scope, entries[0].level, entries[0].message) == (
            "search",
            "error",
            "Search credentials are not configured.",
        )

    def test_recent_is_capped(self, log_store: LogStore) -> None:
        for i in range(15):
            log_store.append("database", "info", f"run {i}")

        assert len(log_store.recent(10)) == 10

    def test_newest_first_with_id_tiebreak(self, log_store: LogStore, storage: FakeStorage) -> None:
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        storage.clock = start + timedelta(minutes=5)
        log_store.append("database", "info", "late")
        storage.clock = start
        log_store.append("database", "info", "early a")
        log_store.append("database", "info", "early b")

        messages = [entry.message for entry in log_store.recent(10)]

        assert messages == ["late", "early b", "early a"]

    def test_recent_orders_in_sql(self, log_store: LogStore, storage: FakeStorage) -> None:
        log_store.recent(5)

        sql, params = storage.statements[-1]
        assert sql.startswith("SELECT id, scope, level, message, created_at FROM catalog_admin_logs")
        assert sql.endswith(RECENT_ORDER_CLAUSE)
        assert params == (5,)

    def test_to_dict(self, log_store: LogStore) -> None:
        log_store.append("combined", "warn", "All tests -> Database: ok | Search: error")

        assert log_store.recent(1)[0].to_dict() == {
            "id": 1,
            "scope": "combined",
            "level": "warn",
            "message": "All tests -> Database: ok | Search: error",
            "createdAt": "2024-01-01T00:00:00+00:00",
        }

    def test_append_failure_propagates(self, log_store: LogStore, storage: FakeStorage) -> None:
        storage.fail = True

        with pytest.raises(psycopg2.OperationalError):
            log_store.append("database", "info", "x")
