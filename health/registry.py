# ============================================================================
# HEALTH CHECK REGISTRY
# ============================================================================
# STATUS: Infrastructure - Health check registration
# PURPOSE: Register, look up and list named checks
# CREATED: 12 OCT 2026
# ============================================================================
"""
Health Check Registry

Holds the named CheckConfig entries for the process.

Design:
- Fail-fast on duplicate names (existing entry is left untouched)
- Registration order is preserved for deterministic output
- Guarded by a lock so checks may also be added at runtime

Usage:
    # Decorator registration (default registry)
    @register_check("cache", timeout=2.0, skip_on_err=True)
    async def cache_check(ctx):
        await redis.ping()

    # Manual registration
    registry = HealthCheckRegistry()
    registry.register(CheckConfig(name="db", check=db_check, timeout=5.0))
"""

import threading
from typing import Callable, Dict, List, Optional

from core.logging import ComponentType, get_logger
from health.core import CheckConfig, CheckFunc
from health.errors import DuplicateNameError, InvalidConfigError

logger = get_logger(__name__, ComponentType.REGISTRY)


class HealthCheckRegistry:
    """
    Registry of health checks keyed by name.

    Entries are immutable once registered; the executor only reads
    snapshots returned by list().
    """

    def __init__(self):
        self._checks: Dict[str, CheckConfig] = {}
        self._lock = threading.Lock()

    def register(self, config: CheckConfig) -> CheckConfig:
        """
        Register a check configuration.

        Raises:
            InvalidConfigError: Empty name, missing check or bad timeout
            DuplicateNameError: A check with the same name already exists
        """
        self._validate(config)

        with self._lock:
            if config.name in self._checks:
                logger.warning(f"Rejected duplicate health check: {config.name}")
                raise DuplicateNameError(config.name)
            self._checks[config.name] = config

        logger.debug(
            f"Registered health check: {config.name} "
            f"(timeout={config.timeout}, skip_on_err={config.skip_on_err})"
        )
        return config

    def register_func(
        self,
        name: str,
        check: CheckFunc,
        timeout: Optional[float] = None,
        skip_on_err: bool = False,
    ) -> CheckConfig:
        """Build a CheckConfig and register it."""
        return self.register(
            CheckConfig(name=name, check=check, timeout=timeout, skip_on_err=skip_on_err)
        )

    def unregister(self, name: str) -> bool:
        """
        Remove a health check by name.

        Returns:
            True if check was removed
        """
        with self._lock:
            return self._checks.pop(name, None) is not None

    def get(self, name: str) -> Optional[CheckConfig]:
        """Get health check by name."""
        with self._lock:
            return self._checks.get(name)

    def list(self) -> List[CheckConfig]:
        """Snapshot of all checks in registration order."""
        with self._lock:
            return list(self._checks.values())

    def as_mapping(self) -> Dict[str, CheckConfig]:
        with self._lock:
            return dict(self._checks)

    def clear(self) -> None:
        """Remove all registered checks."""
        with self._lock:
            self._checks.clear()

    def __len__(self) -> int:
        return len(self._checks)

    def __contains__(self, name: str) -> bool:
        return name in self._checks

    @staticmethod
    def _validate(config: CheckConfig) -> None:
        name = config.name
        if not isinstance(name, str) or not name.strip():
            logger.warning("Rejected health check with empty name")
            raise InvalidConfigError(name, "name must be a non-empty string")
        if config.check is None or not callable(config.check):
            logger.warning(f"Rejected health check without callable: {name}")
            raise InvalidConfigError(name, "check must be callable")
        if config.timeout is not None and config.timeout < 0:
            raise InvalidConfigError(name, "timeout must not be negative")


# ============================================================================
# DEFAULT REGISTRY & DECORATOR
# ============================================================================

_registry: Optional[HealthCheckRegistry] = None


def get_registry() -> HealthCheckRegistry:
    """Get the default health check registry."""
    global _registry
    if _registry is None:
        _registry = HealthCheckRegistry()
    return _registry


def reset_registry() -> None:
    """Drop the default registry (for testing)."""
    global _registry
    _registry = None


def register_check(
    name: str,
    timeout: Optional[float] = None,
    skip_on_err: bool = False,
    registry: Optional[HealthCheckRegistry] = None,
) -> Callable[[CheckFunc], CheckFunc]:
    """
    Decorator to register a check function.

    Args:
        name: Unique check name
        timeout: Max execution time in seconds (None inherits the default)
        skip_on_err: Failure only degrades the report to partiallyUnhealthy
        registry: Target registry (default registry if None)

    Example:
        @register_check("postgres", timeout=5.0)
        async def postgres(ctx):
            ...
    """
    def decorator(func: CheckFunc) -> CheckFunc:
        target = registry if registry is not None else get_registry()
        target.register_func(name, func, timeout=timeout, skip_on_err=skip_on_err)
        return func

    return decorator


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "HealthCheckRegistry",
    "get_registry",
    "reset_registry",
    "register_check",
]
