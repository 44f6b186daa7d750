"""Run both connectivity checks back to back and record one summary line."""

from algoliasearch.search.client import SearchClientSync

from catalog_admin.checks.database import Connector, run_database_check
from catalog_admin.checks.models import (
    CombinedCheckResult,
    DatabaseCheckResult,
    SearchCheckResult,
)
from catalog_admin.checks.search import ClientFactory, run_search_check
from catalog_admin.config.settings import Settings
from catalog_admin.db.connection import create_direct_connection
from catalog_admin.db.repositories.config import AdminConfig
from catalog_admin.db.repositories.logs import LogStore


def _status(result: DatabaseCheckResult | SearchCheckResult) -> str:
    if result.ok:
        return "ok"
    return result.error.message if result.error is not None else "error"


def run_all_checks(
    config: AdminConfig,
    *,
    log_store: LogStore,
    settings: Settings | None = None,
    connect: Connector = create_direct_connection,
    client_factory: ClientFactory = SearchClientSync,
) -> CombinedCheckResult:
    database: DatabaseCheckResult = run_database_check(
        config.database,
        config.tables,
        log_store=log_store,
        log=False,
        connect=connect,
    )
    search: SearchCheckResult = run_search_check(
        config.index_name,
        log_store=log_store,
        log=False,
        settings=settings,
        client_factory=client_factory,
    )

    result = CombinedCheckResult(database=database, search=search)
    log_store.append(
        "combined",
        result.level,
        f"All tests -> Database: {_status(database)} | Search: {_status(search)}",
    )
    return result
