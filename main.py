# ============================================================================
# HEALTHGATE - MAIN APPLICATION
# ============================================================================
# STATUS: Core - FastAPI application entry point
# PURPOSE: Example service exposing aggregated health checks
# CREATED: 12 OCT 2026
# ============================================================================
"""
Healthgate Main Application

FastAPI application that:
1. Registers health checks for the dependencies configured in the environment
2. Serves the aggregate verdict on HEALTH_STATUS_PATH (default /status)

Environment (each check is registered only when its variable is set):
    HEALTH_HTTP_CHECK_URL        - HTTP dependency (skip_on_err)
    HEALTH_POSTGRES_DSN          - PostgreSQL connectivity
    HEALTH_RABBIT_ALIVENESS_URL  - RabbitMQ management aliveness test (skip_on_err)
    HEALTH_CHECK_TIMEOUT         - timeout for the checks above (default 5s)

Usage:
    uvicorn main:app --host 0.0.0.0 --port 3000
"""

import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from __version__ import __version__, BUILD_DATE
from core.config import HealthSettings, get_settings
from core.logging import configure_logging, get_logger
from health import HealthCheckRegistry, HealthService
from health.checks import http_check, postgres_check

logger = get_logger(__name__)


def process_check(ctx) -> None:
    """Always up while the process can schedule work."""
    return None


def register_default_checks(service: HealthService) -> None:
    """Register the example checks enabled by environment variables."""
    timeout = float(os.environ.get("HEALTH_CHECK_TIMEOUT", "5"))

    service.register_func("process", process_check, timeout=1.0)

    url = os.environ.get("HEALTH_HTTP_CHECK_URL")
    if url:
        service.register_func("http-check", http_check(url), timeout=timeout, skip_on_err=True)

    dsn = os.environ.get("HEALTH_POSTGRES_DSN")
    if dsn:
        service.register_func("postgres-check", postgres_check(dsn), timeout=timeout)

    aliveness_url = os.environ.get("HEALTH_RABBIT_ALIVENESS_URL")
    if aliveness_url:
        service.register_func(
            "rabbit-aliveness-check",
            http_check(aliveness_url),
            timeout=timeout,
            skip_on_err=True,
        )


def create_app(
    settings: Optional[HealthSettings] = None,
    service: Optional[HealthService] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        settings: Health settings (environment if None)
        service: Pre-built service; a new one with the default checks if None
    """
    settings = settings or get_settings()
    if service is None:
        service = HealthService(settings, registry=HealthCheckRegistry())
        register_default_checks(service)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            f"Starting healthgate v{__version__} (Build {BUILD_DATE}), "
            f"{len(service.registry)} checks on {settings.status_path}"
        )
        yield
        service.close()
        logger.info("Healthgate stopped")

    app = FastAPI(
        title="Healthgate",
        description="Aggregated health checks",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.health = service
    app.include_router(service.router())
    return app


def _build_default_app() -> FastAPI:
    settings = get_settings()
    configure_logging(
        level=settings.log_level,
        json_output=settings.log_format == "json",
    )
    return create_app(settings)


app = _build_default_app()


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "3000"))

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=os.environ.get("RELOAD", "false").lower() == "true",
    )
