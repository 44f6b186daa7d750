"""
Admin endpoints for config, test history and connectivity checks.

GET  /api/admin/config         - Current config
POST /api/admin/config         - Merge a partial config update
GET  /api/admin/logs           - Most recent test outcomes
POST /api/admin/test/database  - Database check
POST /api/admin/test/search    - Search index check
POST /api/admin/test/all       - Both checks, one summary log line
"""

import logging
from typing import Any

from flask import Blueprint, request
import psycopg2

from catalog_admin.checks.combined import run_all_checks
from catalog_admin.checks.database import run_database_check
from catalog_admin.checks.search import run_search_check
from catalog_admin.db.connection import get_pool
from catalog_admin.db.repositories.config import (
    AdminConfig,
    AdminConfigResponse,
    ConfigStore,
    apply_overrides,
    parse_config_update,
)
from catalog_admin.db.repositories.logs import RECENT_LOGS_LIMIT, LogStore
from catalog_admin.exceptions import ConfigurationError

logger: logging.Logger = logging.getLogger(__name__)
admin_bp: Blueprint = Blueprint("admin", __name__, url_prefix="/api/admin")


def _payload() -> dict[str, Any]:
    """Request JSON body, or {} when missing, malformed or not an object."""
    data: Any = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _config_store() -> ConfigStore:
    return ConfigStore(get_pool())


def _log_store() -> LogStore:
    return LogStore(get_pool())


@admin_bp.errorhandler(psycopg2.Error)
@admin_bp.errorhandler(ConfigurationError)
def _storage_error(e: Exception) -> tuple[dict[str, str], int]:
    logger.error("%s %s: Admin storage error - %s", request.method, request.path, e)
    return {"error": "Failed to load admin data"}, 500


@admin_bp.get("/config")
def get_config() -> AdminConfigResponse:
    return _config_store().get().to_dict()


@admin_bp.post("/config")
def post_config() -> AdminConfigResponse:
    updates: dict[str, str] = parse_config_update(_payload())
    return _config_store().merge(updates).to_dict()


@admin_bp.get("/logs")
def get_logs() -> dict[str, list[Any]]:
    entries = _log_store().recent(RECENT_LOGS_LIMIT)
    return {"logs": [entry.to_dict() for entry in entries]}


@admin_bp.post("/test/database")
def test_database() -> dict[str, Any]:
    config: AdminConfig = apply_overrides(_payload(), _config_store().get())
    result = run_database_check(config.database, config.tables, log_store=_log_store())
    return result.to_dict()


@admin_bp.post("/test/search")
def test_search() -> dict[str, Any]:
    payload: dict[str, Any] = _payload()
    # Only the index name may be overridden here
    config: AdminConfig = apply_overrides(
        {"indexName": payload.get("indexName")}, _config_store().get()
    )
    result = run_search_check(config.index_name, log_store=_log_store())
    return result.to_dict()


@admin_bp.post("/test/all")
def test_all() -> dict[str, Any]:
    config: AdminConfig = apply_overrides(_payload(), _config_store().get())
    result = run_all_checks(config, log_store=_log_store())
    return result.to_dict()
