# ============================================================================
# HEALTH CHECK ERRORS
# ============================================================================
# STATUS: Infrastructure - Error taxonomy for the health engine
# PURPOSE: Registration errors and recorded per-check failures
# CREATED: 12 OCT 2026
# ============================================================================
"""
Health Check Errors

Two families:
- Registration errors (InvalidConfigError, DuplicateNameError) are raised
  to the caller of register().
- Execution errors (CheckFailureError, CheckTimeoutError) are recorded in
  a CheckResult and never raised out of the executor or the router.
"""

from typing import Optional


class HealthCheckError(Exception):
    """Base exception for health engine errors."""
    pass


class InvalidConfigError(HealthCheckError, ValueError):
    """Raised when a check configuration is rejected at registration."""
    def __init__(self, name: Optional[str], reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid health check config {name!r}: {reason}")


class DuplicateNameError(HealthCheckError):
    """Raised when a check name is already registered."""
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Health check already registered: {name}")


class CheckFailureError(HealthCheckError):
    """A probe reported failure. Wraps the exception the check raised."""
    def __init__(self, name: str, cause: BaseException):
        self.name = name
        self.cause = cause
        message = str(cause) or type(cause).__name__
        super().__init__(message)

    @property
    def kind(self) -> str:
        return type(self.cause).__name__


class CheckTimeoutError(HealthCheckError, TimeoutError):
    """A probe did not finish before its deadline."""
    def __init__(self, name: str, timeout: float):
        self.name = name
        self.timeout = timeout
        super().__init__(f"check timed out after {timeout:g}s")

    @property
    def kind(self) -> str:
        return "timeout"


__all__ = [
    "HealthCheckError",
    "InvalidConfigError",
    "DuplicateNameError",
    "CheckFailureError",
    "CheckTimeoutError",
]
