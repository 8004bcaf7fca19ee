# ============================================================================
# HEALTH CHECK MODULE
# ============================================================================
# STATUS: Infrastructure - Health check aggregation engine
# PURPOSE: Run named probes concurrently and serve one verdict over HTTP
# CREATED: 12 OCT 2026
# ============================================================================
"""
Health Check Module

Aggregates named probes into a single liveness/readiness verdict:
- /livez: Process alive (instant, no checks)
- /status: Aggregate report (200 healthy/partiallyUnhealthy, 503 unhealthy)

Architecture:
- CheckConfig / CheckContext: the probe contract
- HealthCheckRegistry: named checks, duplicate names rejected
- HealthCheckExecutor: concurrent execution with per-check timeouts
- aggregate(): pure status derivation
- ReportCache: optional minimum refresh interval
- HealthService + build_health_router: FastAPI wiring

Usage:
    from health import HealthService, register_check
    from health.checks import http_check

    service = HealthService()
    service.register_func("api", http_check("http://api:8080/ping"), timeout=2.0)

    @register_check("scratch-disk", skip_on_err=True)
    def scratch_disk(ctx):
        ...

    app.include_router(service.router())
"""

from health.core import (
    CheckStatus,
    OverallStatus,
    CheckContext,
    CheckFunc,
    CheckConfig,
    CheckResult,
    AggregateReport,
)
from health.errors import (
    HealthCheckError,
    InvalidConfigError,
    DuplicateNameError,
    CheckFailureError,
    CheckTimeoutError,
)
from health.registry import (
    HealthCheckRegistry,
    register_check,
    get_registry,
    reset_registry,
)
from health.executor import HealthCheckExecutor
from health.aggregator import aggregate, derive_status
from health.cache import ReportCache
from health.router import build_health_router
from health.service import HealthService

__all__ = [
    # Core types
    "CheckStatus",
    "OverallStatus",
    "CheckContext",
    "CheckFunc",
    "CheckConfig",
    "CheckResult",
    "AggregateReport",
    # Errors
    "HealthCheckError",
    "InvalidConfigError",
    "DuplicateNameError",
    "CheckFailureError",
    "CheckTimeoutError",
    # Registry
    "HealthCheckRegistry",
    "register_check",
    "get_registry",
    "reset_registry",
    # Execution
    "HealthCheckExecutor",
    "aggregate",
    "derive_status",
    "ReportCache",
    # HTTP
    "build_health_router",
    "HealthService",
]
