# ============================================================================
# HEALTH CHECK CORE TYPES
# ============================================================================
# STATUS: Infrastructure - Check contract and result types
# PURPOSE: CheckFunc contract, check configuration, results and reports
# CREATED: 12 OCT 2026
# ============================================================================
"""
Health Check Core Types

A check is any callable taking a CheckContext:

    async def check(ctx: CheckContext) -> None      # runs on the event loop
    def check(ctx: CheckContext) -> None            # runs in a worker thread

Returning normally means "up"; raising means "down" with the exception
recorded. Checks should honour cancellation: async checks receive task
cancellation, sync checks should poll ctx.cancelled or block on ctx.wait().

Status derivation for a report:
- unhealthy: some check is down and skip_on_err is False
- partiallyUnhealthy: only skip_on_err checks are down
- healthy: otherwise (including no checks at all)
"""

import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional, Union


def rfc3339(value: datetime) -> str:
    """Format an aware datetime as RFC3339 in UTC with a 'Z' suffix."""
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CheckStatus(str, Enum):
    """Outcome of a single check execution."""
    UP = "up"
    DOWN = "down"


class OverallStatus(str, Enum):
    """Aggregate status over all registered checks."""
    HEALTHY = "healthy"
    PARTIALLY_UNHEALTHY = "partiallyUnhealthy"
    UNHEALTHY = "unhealthy"

    @property
    def http_status(self) -> int:
        """HTTP code for this status. Partial failures still count as available."""
        if self is OverallStatus.UNHEALTHY:
            return 503
        return 200


class CheckContext:
    """
    Cancellable execution context handed to every check.

    The executor calls cancel() when the check's deadline passes or the
    request that triggered the run goes away. It never waits for the check
    to notice.
    """

    def __init__(
        self,
        name: str,
        timeout: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.name = name
        self.timeout = timeout
        self._clock = clock
        self.deadline = clock() + timeout
        self._cancelled = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set() or self._clock() >= self.deadline

    def remaining(self) -> float:
        """Seconds left before the deadline (never negative)."""
        return max(0.0, self.deadline - self._clock())

    def cancel(self) -> None:
        self._cancelled.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block the calling thread until cancelled or the deadline passes.

        Returns True if the context was cancelled or expired.
        """
        limit = self.remaining() if timeout is None else min(timeout, self.remaining())
        self._cancelled.wait(limit)
        return self.cancelled

    def __repr__(self) -> str:
        return f"CheckContext(name={self.name!r}, remaining={self.remaining():.3f})"


CheckFunc = Callable[[CheckContext], Union[None, Awaitable[None]]]


@dataclass(frozen=True)
class CheckConfig:
    """
    One registered probe.

    Attributes:
        name: Unique identifier for the check
        check: The probe callable (sync or async)
        timeout: Max execution time in seconds; None/0 inherits the default
        skip_on_err: If True, failure only degrades to partiallyUnhealthy
    """
    name: str
    check: CheckFunc
    timeout: Optional[float] = None
    skip_on_err: bool = False

    def effective_timeout(self, default: float) -> float:
        return self.timeout if self.timeout else default


@dataclass
class CheckResult:
    """Result from a single check execution."""
    status: CheckStatus
    error: Optional[str] = None
    error_kind: Optional[str] = None
    timestamp: datetime = field(default_factory=utcnow)
    duration_ms: float = 0.0

    @property
    def is_up(self) -> bool:
        return self.status == CheckStatus.UP

    @classmethod
    def up(cls, duration_ms: float = 0.0) -> "CheckResult":
        """Create up result."""
        return cls(status=CheckStatus.UP, duration_ms=duration_ms)

    @classmethod
    def down(
        cls,
        error: str,
        kind: Optional[str] = None,
        duration_ms: float = 0.0,
    ) -> "CheckResult":
        """Create down result."""
        return cls(
            status=CheckStatus.DOWN,
            error=error,
            error_kind=kind,
            duration_ms=duration_ms,
        )

    @classmethod
    def from_exception(cls, e: BaseException, duration_ms: float = 0.0) -> "CheckResult":
        """Create down result from an exception (CheckFailureError or CheckTimeoutError)."""
        kind = getattr(e, "kind", None) or type(e).__name__
        return cls.down(str(e) or type(e).__name__, kind=kind, duration_ms=duration_ms)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response."""
        result: Dict[str, Any] = {
            "status": self.status.value,
            "timestamp": rfc3339(self.timestamp),
            "duration_ms": round(self.duration_ms, 2),
        }
        if self.status == CheckStatus.DOWN:
            result["error"] = self.error or "unknown error"
            if self.error_kind:
                result["error_kind"] = self.error_kind
        return result


@dataclass
class AggregateReport:
    """Aggregate verdict from one execution cycle."""
    status: OverallStatus
    details: Dict[str, CheckResult] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=utcnow)
    component: Optional[Dict[str, str]] = None
    system: Optional[Dict[str, Any]] = None

    @property
    def http_status(self) -> int:
        return self.status.http_status

    @property
    def failures(self) -> Dict[str, str]:
        """Down checks mapped to their error message."""
        return {
            name: result.error or "unknown error"
            for name, result in self.details.items()
            if result.status == CheckStatus.DOWN
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response."""
        body: Dict[str, Any] = {
            "status": self.status.value,
            "timestamp": rfc3339(self.timestamp),
            "details": {
                name: result.to_dict()
                for name, result in self.details.items()
            },
        }
        if self.component:
            body["component"] = dict(self.component)
        if self.system:
            body["system"] = dict(self.system)
        return body


__all__ = [
    "CheckStatus",
    "OverallStatus",
    "CheckContext",
    "CheckFunc",
    "CheckConfig",
    "CheckResult",
    "AggregateReport",
    "rfc3339",
    "utcnow",
]
