# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 12 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration for the health service.
"""

from core.config.settings import (
    HealthSettings,
    get_settings,
    reset_settings,
)

__all__ = [
    "HealthSettings",
    "get_settings",
    "reset_settings",
]
