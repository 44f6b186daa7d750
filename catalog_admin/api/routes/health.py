"""
Liveness of the admin service.

Readiness follows the admin storage only. The search field reports whether
search credentials are present; the index itself is checked on demand via
/api/admin/test/search, never from here.
"""

from typing import Literal, TypedDict

from flask import Blueprint, current_app

from catalog_admin.config.settings import Settings, get_settings
from catalog_admin.db.connection import check_database_health

health_bp: Blueprint = Blueprint("health", __name__)


class HealthResponse(TypedDict):
    status: Literal["healthy", "unhealthy"]
    database: Literal["connected", "disconnected"]
    search: Literal["configured", "not_configured"]


def _settings() -> Settings:
    return current_app.config.get("SETTINGS") or get_settings()


@health_bp.get("/health")
def health_check() -> tuple[HealthResponse, int]:
    """503 when the admin storage is unreachable, 200 otherwise."""
    storage_up: bool = check_database_health()
    search_ready: bool = _settings().has_search_credentials

    body = HealthResponse(
        status="healthy" if storage_up else "unhealthy",
        database="connected" if storage_up else "disconnected",
        search="configured" if search_ready else "not_configured",
    )
    return body, 200 if storage_up else 503
