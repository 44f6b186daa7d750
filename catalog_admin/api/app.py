"""Flask application factory for the catalog admin service."""

import atexit
import logging
import time

from flask import Flask, Response, g, request

from catalog_admin.api.routes.admin import admin_bp
from catalog_admin.api.routes.health import health_bp
from catalog_admin.config.settings import Settings, get_settings
from catalog_admin.db.connection import close_pool

LOG_FORMAT: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger: logging.Logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)


def create_app(settings: Settings | None = None) -> Flask:
    """Build the admin app; `settings` defaults to the environment."""
    settings = settings or get_settings()
    configure_logging(settings)

    app: Flask = Flask(__name__)
    app.config["SETTINGS"] = settings
    app.register_blueprint(admin_bp)
    app.register_blueprint(health_bp)
    log_request_durations(app)

    atexit.register(close_pool)
    logger.debug(
        "Admin app ready (search credentials %s)",
        "present" if settings.has_search_credentials else "missing",
    )
    return app


def log_request_durations(app: Flask) -> None:
    @app.before_request
    def _mark_start() -> None:  # pyright: ignore[reportUnusedFunction]
        g.request_started = time.perf_counter()

    @app.after_request
    def _log_duration(response: Response) -> Response:  # pyright: ignore[reportUnusedFunction]
        started: float | None = g.get("request_started")
        if started is not None:
            logger.info(
                "%s %s - %d - %.2fms",
                request.method,
                request.path,
                response.status_code,
                (time.perf_counter() - started) * 1000,
            )
        return response


app: Flask = create_app()


if __name__ == "__main__":
    current: Settings = app.config["SETTINGS"]
    app.run(host=current.api_host, port=current.api_port, debug=current.api_debug)
