"""Result types for connectivity checks and their JSON shapes."""

from dataclasses import dataclass, field
from typing import Any

from catalog_admin.db.repositories.logs import LogLevel


@dataclass(frozen=True)
class CheckError:
    message: str
    code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"message": self.message}
        if self.code is not None:
            data["code"] = self.code
        return data


@dataclass(frozen=True)
class TableCheck:
    name: str
    exists: bool
    row_count: int | None = None
    message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "exists": self.exists}
        if self.row_count is not None:
            data["rowCount"] = self.row_count
        if self.message is not None:
            data["message"] = self.message
        return data


@dataclass(frozen=True)
class DatabaseCheckResult:
    ok: bool
    database: str
    duration_ms: int
    tables: list[TableCheck] = field(default_factory=list)
    error: CheckError | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "ok": self.ok,
            "db": self.database,
            "tables": [table.to_dict() for table in self.tables],
            "durationMs": self.duration_ms,
        }
        if self.error is not None:
            data["error"] = self.error.to_dict()
        return data


@dataclass(frozen=True)
class SearchCheckResult:
    ok: bool
    index_name: str
    has_settings: bool | None = None
    error: CheckError | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"ok": self.ok, "indexName": self.index_name}
        if self.has_settings is not None:
            data["hasSettings"] = self.has_settings
        if self.error is not None:
            data["error"] = self.error.to_dict()
        return data


@dataclass(frozen=True)
class CombinedCheckResult:
    database: DatabaseCheckResult
    search: SearchCheckResult

    @property
    def level(self) -> LogLevel:
        """info when both passed, warn when exactly one did, error otherwise."""
        if self.database.ok and self.search.ok:
            return "info"
        if self.database.ok or self.search.ok:
            return "warn"
        return "error"

    def to_dict(self) -> dict[str, Any]:
        return {"database": self.database.to_dict(), "search": self.search.to_dict()}
