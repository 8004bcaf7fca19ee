# ============================================================================
# HEALTH SERVICE
# ============================================================================
# STATUS: Infrastructure - Health engine facade
# PURPOSE: Wire registry, executor, aggregator and cache together
# CREATED: 12 OCT 2026
# ============================================================================
"""
Health Service

Owns one registry, one executor and (optionally) one report cache.

Usage:
    service = HealthService(HealthSettings(min_refresh_interval=10.0))
    service.register_func("postgres", postgres_check(dsn), timeout=5.0)
    service.register_func("cdn", http_check("https://cdn.example.com"), skip_on_err=True)

    app.include_router(service.router())
"""

import time
from typing import Callable, Dict, Iterable, Optional

from fastapi import APIRouter

from core.config import HealthSettings, get_settings
from core.logging import get_logger
from health.aggregator import aggregate
from health.cache import ReportCache
from health.core import AggregateReport, CheckConfig, CheckFunc, CheckResult
from health.executor import HealthCheckExecutor
from health.registry import HealthCheckRegistry, get_registry
from health.router import build_health_router
from health.system import collect_system_info

logger = get_logger(__name__)


class HealthService:
    """Health engine facade used by the HTTP router and by setup code."""

    def __init__(
        self,
        settings: Optional[HealthSettings] = None,
        registry: Optional[HealthCheckRegistry] = None,
        checks: Optional[Iterable[CheckConfig]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            settings: Process-wide options (environment if None)
            registry: Check registry (default registry if None)
            checks: Configs to register immediately
            clock: Monotonic clock for the cache
        """
        self.settings = settings or get_settings()
        self.registry = registry if registry is not None else get_registry()
        self.executor = HealthCheckExecutor(
            registry=self.registry,
            default_timeout=self.settings.default_timeout,
            max_wait=self.settings.max_wait,
            max_concurrent=self.settings.max_concurrent,
        )
        self.cache: Optional[ReportCache] = None
        if self.settings.cache_enabled:
            self.cache = ReportCache(self.settings.min_refresh_interval, clock=clock)

        for config in checks or ():
            self.register(config)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, config: CheckConfig) -> CheckConfig:
        return self.registry.register(config)

    def register_func(
        self,
        name: str,
        check: CheckFunc,
        timeout: Optional[float] = None,
        skip_on_err: bool = False,
    ) -> CheckConfig:
        return self.registry.register_func(name, check, timeout=timeout, skip_on_err=skip_on_err)

    def unregister(self, name: str) -> bool:
        removed = self.registry.unregister(name)
        if removed and self.cache is not None:
            self.cache.invalidate()
        return removed

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    @property
    def component(self) -> Optional[Dict[str, str]]:
        if not self.settings.component_name:
            return None
        component = {"name": self.settings.component_name}
        if self.settings.component_version:
            component["version"] = self.settings.component_version
        return component

    async def measure(self) -> AggregateReport:
        """Run every check now and aggregate, bypassing the cache."""
        configs = self.registry.list()
        results = await self.executor.run(configs)
        report = aggregate(
            results,
            {config.name: config for config in configs},
            component=self.component,
            system=collect_system_info() if self.settings.include_system_info else None,
        )
        logger.debug(
            f"Health report: {report.status.value} "
            f"({len(results)} checks, {len(report.failures)} down)"
        )
        return report

    async def report(self) -> AggregateReport:
        """Current report, served from the cache when one is configured."""
        if self.cache is None:
            return await self.measure()
        return await self.cache.get(self.measure)

    async def check_one(self, name: str) -> Optional[CheckResult]:
        """Run a single check by name (never cached)."""
        return await self.executor.run_one(name)

    def router(self) -> APIRouter:
        """FastAPI router exposing this service."""
        return build_health_router(self)

    def close(self) -> None:
        self.executor.close()


__all__ = [
    "HealthService",
]
