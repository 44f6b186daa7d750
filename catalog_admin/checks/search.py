"""Connectivity check against an Algolia search index."""

import logging
from typing import Callable

from algoliasearch.http.exceptions import AlgoliaException
from algoliasearch.search.client import SearchClientSync

from catalog_admin.checks.models import CheckError, SearchCheckResult
from catalog_admin.config.settings import Settings, get_settings
from catalog_admin.db.repositories.logs import LogStore

logger: logging.Logger = logging.getLogger(__name__)

MISSING_CREDENTIALS: str = "Search credentials are not configured."

ClientFactory = Callable[[str, str], SearchClientSync]


def run_search_check(
    index_name: str,
    *,
    log_store: LogStore,
    log: bool = True,
    settings: Settings | None = None,
    client_factory: ClientFactory = SearchClientSync,
) -> SearchCheckResult:
    """
    Fetch the index settings and run an empty zero-hit query.

    No client is created when the app id or admin key is missing.
    """
    settings = settings or get_settings()

    if not settings.has_search_credentials:
        result = SearchCheckResult(
            ok=False,
            index_name=index_name,
            error=CheckError(message=MISSING_CREDENTIALS),
        )
        if log:
            log_store.append("search", "error", MISSING_CREDENTIALS)
        return result

    client: SearchClientSync = client_factory(
        settings.algolia_app_id, settings.algolia_admin_api_key  # type: ignore[arg-type]
    )
    try:
        client.get_settings(index_name=index_name)
        client.search_single_index(
            index_name=index_name,
            search_params={"query": "", "hitsPerPage": 0},
        )
        result = SearchCheckResult(ok=True, index_name=index_name, has_settings=True)
    except (AlgoliaException, ValueError, OSError) as e:
        logger.warning("Search check failed for index %r: %s", index_name, e)
        result = SearchCheckResult(
            ok=False,
            index_name=index_name,
            error=CheckError(
                message=str(e).strip() or "Unknown search error",
                code=type(e).__name__,
            ),
        )
    finally:
        client.close()

    if log:
        if result.ok:
            log_store.append("search", "info", f"Search index `{index_name}` reachable.")
        else:
            log_store.append(
                "search",
                "error",
                f"Search error for `{index_name}`: {result.error.message}",  # type: ignore[union-attr]
            )

    return result
