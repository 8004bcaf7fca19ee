# ============================================================================
# HEALTH SETTINGS
# ============================================================================
# STATUS: Core - Process-wide health engine configuration
# PURPOSE: Environment-based configuration with validated defaults
# CREATED: 12 OCT 2026
# ============================================================================
"""
Health Settings

Process-wide options for the health engine. Per-check options
(name, timeout, skip_on_err) live on CheckConfig instead.

Environment variables:
    HEALTH_DEFAULT_TIMEOUT       - timeout for checks without one (seconds)
    HEALTH_MAX_WAIT              - overall ceiling for one run (seconds)
    HEALTH_MIN_REFRESH_INTERVAL  - serve cached report for this long (0 = off)
    HEALTH_STATUS_PATH           - HTTP path of the status endpoint
    HEALTH_MAX_CONCURRENT        - max checks running at once (0 = unbounded)
    HEALTH_SYSTEM_INFO           - include process info in reports
    SERVICE_NAME / APP_VERSION   - component info in reports
    LOG_LEVEL / LOG_FORMAT       - logging setup
"""

import os
from dataclasses import dataclass
from typing import Optional

from __version__ import __version__


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str) -> Optional[float]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    return float(value)


@dataclass(frozen=True)
class HealthSettings:
    """
    Process-wide health engine options.

    Attributes:
        default_timeout: Bound for checks registered without a timeout
        max_wait: Overall ceiling for one run; None means max(per-check timeouts)
        min_refresh_interval: Minimum seconds between recomputations (0 disables)
        status_path: Path the status endpoint is mounted on
        max_concurrent: Max checks executing at once (0 = unbounded)
        include_system_info: Add process info to every report
        component_name: Reported component name (None omits the block)
        component_version: Reported component version
    """
    default_timeout: float = 5.0
    max_wait: Optional[float] = None
    min_refresh_interval: float = 0.0
    status_path: str = "/status"
    max_concurrent: int = 0
    include_system_info: bool = False
    component_name: Optional[str] = None
    component_version: Optional[str] = None
    log_level: str = "INFO"
    log_format: str = "human"

    def __post_init__(self):
        if self.default_timeout <= 0:
            raise ValueError("default_timeout must be positive")
        if self.max_wait is not None and self.max_wait <= 0:
            raise ValueError("max_wait must be positive")
        if self.min_refresh_interval < 0:
            raise ValueError("min_refresh_interval must be non-negative")
        if self.max_concurrent < 0:
            raise ValueError("max_concurrent must be non-negative")
        if not self.status_path.startswith("/"):
            raise ValueError(f"status_path must start with '/': {self.status_path!r}")

    @property
    def cache_enabled(self) -> bool:
        return self.min_refresh_interval > 0

    @classmethod
    def from_env(cls) -> "HealthSettings":
        """Load settings from environment variables."""
        return cls(
            default_timeout=float(os.getenv("HEALTH_DEFAULT_TIMEOUT", "5.0")),
            max_wait=_env_float("HEALTH_MAX_WAIT"),
            min_refresh_interval=float(os.getenv("HEALTH_MIN_REFRESH_INTERVAL", "0")),
            status_path=os.getenv("HEALTH_STATUS_PATH", "/status"),
            max_concurrent=int(os.getenv("HEALTH_MAX_CONCURRENT", "0")),
            include_system_info=_env_bool("HEALTH_SYSTEM_INFO"),
            component_name=os.getenv("SERVICE_NAME", "healthgate"),
            component_version=os.getenv("APP_VERSION", __version__),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "human").lower(),
        )


# ============================================================================
# GLOBAL SETTINGS
# ============================================================================

_settings: Optional[HealthSettings] = None


def get_settings() -> HealthSettings:
    """Get global settings instance."""
    global _settings
    if _settings is None:
        _settings = HealthSettings.from_env()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "HealthSettings",
    "get_settings",
    "reset_settings",
]
