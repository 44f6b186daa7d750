"""
Application configuration using Pydantic Settings.

Reads from environment variables and .env file.
Storage credentials are optional here and validated when a connection is
built, so a missing value fails the connectivity check instead of startup.
"""

from functools import lru_cache
from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict

from catalog_admin.exceptions import ConfigurationError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    postgres_host: str | None = None
    postgres_port: int = 5432
    postgres_user: str | None = None
    postgres_password: str | None = None
    postgres_db: str | None = None
    postgres_sslrootcert: str | None = None
    postgres_sslmode: str | None = None
    db_pool_min: int = 1
    db_pool_max: int = 5

    algolia_app_id: str | None = None
    algolia_admin_api_key: str | None = None

    api_host: str = "0.0.0.0"
    api_port: int = 5001
    api_debug: bool = False
    log_level: str = "INFO"

    @property
    def default_database(self) -> str:
        return self.postgres_db or ""

    @property
    def has_search_credentials(self) -> bool:
        return bool(self.algolia_app_id and self.algolia_admin_api_key)

    def connection_kwargs(self, database: str | None = None) -> dict[str, Any]:
        """Keyword arguments for psycopg2, targeting `database` or the default."""
        dbname: str | None = database or self.postgres_db
        if not (self.postgres_host and self.postgres_user and self.postgres_password and dbname):
            raise ConfigurationError(
                "PostgreSQL environment variables are not fully configured."
            )

        kwargs: dict[str, Any] = {
            "host": self.postgres_host,
            "port": self.postgres_port,
            "user": self.postgres_user,
            "password": self.postgres_password,
            "dbname": dbname,
        }
        if self.postgres_sslrootcert:
            kwargs["sslrootcert"] = self.postgres_sslrootcert
            kwargs["sslmode"] = self.postgres_sslmode or "verify-ca"
        elif self.postgres_sslmode:
            kwargs["sslmode"] = self.postgres_sslmode
        return kwargs


@lru_cache
def get_settings() -> Settings:
    return Settings()
