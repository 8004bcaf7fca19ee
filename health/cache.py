# ============================================================================
# HEALTH REPORT CACHE
# ============================================================================
# STATUS: Infrastructure - Throttled report recomputation
# PURPOSE: Serve the last report between refreshes, one recompute at a time
# CREATED: 12 OCT 2026
# ============================================================================
"""
Health Report Cache

Throttles recomputation of the aggregate report:

- Younger than min_interval: the cached report is returned unchanged.
- Older (or empty): the caller starts a recomputation and waits for it.
- A recomputation already in flight: callers get the stale report
  immediately. Only when nothing is cached yet do they join the
  in-flight recomputation.
- invalidate() supersedes an in-flight recomputation: its result is
  returned to the callers already waiting on it but never stored, and the
  next caller starts a new one.

The recomputation runs as its own task, shielded from the cancellation
of any single waiting request. State changes happen between awaits on
the event loop thread, so the check-then-start section is atomic.
"""

import asyncio
import time
from typing import Awaitable, Callable, Optional

from core.logging import ComponentType, get_logger
from health.core import AggregateReport

logger = get_logger(__name__, ComponentType.CACHE)

ComputeFunc = Callable[[], Awaitable[AggregateReport]]


def _log_refresh_failure(task: asyncio.Task) -> None:
    if not task.cancelled() and task.exception() is not None:
        logger.error(f"Health report refresh failed: {task.exception()}")


class ReportCache:
    """Single cached AggregateReport with a minimum refresh interval."""

    def __init__(
        self,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        if min_interval < 0:
            raise ValueError("min_interval must be non-negative")
        self.min_interval = min_interval
        self._clock = clock
        self._report: Optional[AggregateReport] = None
        self._computed_at: Optional[float] = None
        self._refresh: Optional[asyncio.Task] = None
        # Bumped by invalidate(); a refresh stores its report only if unchanged
        self._generation = 0
        self._refresh_generation = 0

    @property
    def report(self) -> Optional[AggregateReport]:
        return self._report

    @property
    def last_computed(self) -> Optional[float]:
        """Clock value when the cached report was stored."""
        return self._computed_at

    @property
    def refreshing(self) -> bool:
        return self._refresh is not None and not self._refresh.done()

    def is_fresh(self) -> bool:
        if self._report is None or self._computed_at is None:
            return False
        return self._clock() - self._computed_at < self.min_interval

    def invalidate(self) -> None:
        """Forget the cached report and disown any in-flight refresh."""
        self._generation += 1
        self._report = None
        self._computed_at = None

    async def get(self, compute: ComputeFunc) -> AggregateReport:
        """Return the cached report or recompute it via compute()."""
        if self.is_fresh():
            return self._report

        if self.refreshing and self._refresh_generation == self._generation:
            if self._report is not None:
                logger.debug("Refresh in progress, serving stale health report")
                return self._report
            return await asyncio.shield(self._refresh)

        logger.debug("Health report stale, recomputing")
        self._refresh_generation = self._generation
        self._refresh = asyncio.ensure_future(self._recompute(compute, self._generation))
        self._refresh.add_done_callback(_log_refresh_failure)
        return await asyncio.shield(self._refresh)

    async def _recompute(self, compute: ComputeFunc, generation: int) -> AggregateReport:
        report = await compute()
        if generation != self._generation:
            logger.debug("Cache invalidated during refresh, discarding report")
            return report
        self._report = report
        self._computed_at = self._clock()
        return report


__all__ = [
    "ReportCache",
]
