# ============================================================================
# HEALTH CHECK PROBES
# ============================================================================
# STATUS: Infrastructure - Built-in probe implementations
# PURPOSE: Ready-made checks for common dependencies
# CREATED: 12 OCT 2026
# ============================================================================
"""
Health Check Probes

Each factory returns a function satisfying the check contract
(takes a CheckContext, raises on failure):

- http_check: HTTP reachability (also broker management aliveness tests)
- postgres_check: PostgreSQL connectivity

Any other callable taking a CheckContext works the same way.
"""

from health.checks.http import http_check, HTTPCheckError
from health.checks.postgres import postgres_check, PostgresCheckError

__all__ = [
    "http_check",
    "HTTPCheckError",
    "postgres_check",
    "PostgresCheckError",
]
