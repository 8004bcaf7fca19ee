# ============================================================================
# CORE MODULE
# ============================================================================
# STATUS: Core module initialization
# PURPOSE: Export configuration and logging utilities
# CREATED: 12 OCT 2026
# ============================================================================

from core.config import HealthSettings, get_settings, reset_settings
from core.logging import configure_logging, get_logger, log_context

__all__ = [
    # Config
    "HealthSettings",
    "get_settings",
    "reset_settings",
    # Logging
    "configure_logging",
    "get_logger",
    "log_context",
]
