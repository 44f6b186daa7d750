"""
Pytest configuration and shared fixtures.

Fixtures defined here are available to all test files automatically.
"""

from typing import Iterator

import pytest

from catalog_admin.config.settings import Settings, get_settings
from catalog_admin.db.connection import set_test_pool
from catalog_admin.db.repositories.logs import LogStore
from tests.fakes import FakePool, FakeStorage


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def fake_pool(storage: FakeStorage) -> Iterator[FakePool]:
    """Fake pool, also installed as the process-wide pool override."""
    pool = FakePool(storage)
    set_test_pool(pool)  # type: ignore[arg-type]
    yield pool
    set_test_pool(None)


@pytest.fixture
def log_store(fake_pool: FakePool) -> LogStore:
    return LogStore(fake_pool)  # type: ignore[arg-type]


@pytest.fixture
def search_settings() -> Settings:
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        algolia_app_id="APPID",
        algolia_admin_api_key="admin-key",
    )


@pytest.fixture
def no_search_settings() -> Settings:
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        algolia_app_id=None,
        algolia_admin_api_key=None,
    )


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Drop storage/search env vars and reset the cached settings."""
    for name in (
        "POSTGRES_HOST",
        "POSTGRES_USER",
        "POSTGRES_PASSWORD",
        "POSTGRES_DB",
        "POSTGRES_SSLROOTCERT",
        "POSTGRES_SSLMODE",
        "ALGOLIA_APP_ID",
        "ALGOLIA_ADMIN_API_KEY",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
