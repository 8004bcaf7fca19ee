# ============================================================================
# HEALTH CHECK EXECUTOR
# ============================================================================
# STATUS: Infrastructure - Concurrent health check execution
# PURPOSE: Run every check in parallel, each bounded by its own timeout
# CREATED: 12 OCT 2026
# ============================================================================
"""
Health Check Executor

Executes health checks with:
- One task per check, all started together (fan-out)
- Per-check deadline carried by a CheckContext
- Overall ceiling: max_wait, or the largest per-check timeout
- Abandonment instead of joining: a check that misses its deadline is
  recorded down with CheckTimeoutError, signalled to stop, and never
  awaited again

Async checks run on the event loop. Sync checks each get a dedicated
daemon thread, so a queue of slow checks never eats into another check's
deadline. A sync callable that returns an awaitable (a lambda wrapping a
coroutine function, say) has that awaitable run on the loop. A sync check
that ignores ctx.cancelled keeps its thread alive until it returns on
its own.

If the coroutine awaiting run()/run_all() is cancelled (for instance the
HTTP client went away), every in-flight check is signalled and abandoned
and the CancelledError propagates.
"""

import asyncio
import inspect
import threading
import time
from typing import Any, Dict, List, Optional, Set

from core.logging import ComponentType, get_logger, log_context
from health.core import CheckConfig, CheckContext, CheckResult
from health.errors import CheckFailureError, CheckTimeoutError
from health.registry import HealthCheckRegistry, get_registry

logger = get_logger(__name__, ComponentType.EXECUTOR)

# Slack on the derived ceiling so per-check deadlines fire first
CEILING_GRACE_SECONDS = 0.05


def _is_async_check(check) -> bool:
    return inspect.iscoroutinefunction(check) or inspect.iscoroutinefunction(
        getattr(check, "__call__", None)
    )


def _discard_outcome(future: asyncio.Future) -> None:
    # Abandoned futures: retrieve the outcome so asyncio does not log it
    if not future.cancelled():
        future.exception()


class HealthCheckExecutor:
    """
    Executes health checks concurrently with per-check timeouts.

    The executor never mutates registry entries; it works on the
    snapshot returned by registry.list().
    """

    def __init__(
        self,
        registry: Optional[HealthCheckRegistry] = None,
        default_timeout: float = 5.0,
        max_wait: Optional[float] = None,
        max_concurrent: int = 0,
    ):
        """
        Initialize executor.

        Args:
            registry: Health check registry (uses default if None)
            default_timeout: Timeout for checks registered without one
            max_wait: Overall ceiling; None derives it from per-check timeouts
            max_concurrent: Max checks running at once (0 = unbounded)
        """
        self.registry = registry if registry is not None else get_registry()
        self.default_timeout = default_timeout
        self.max_wait = max_wait
        self.max_concurrent = max_concurrent
        # Contexts of sync checks whose threads are still running
        self._running: Set[CheckContext] = set()
        self._running_lock = threading.Lock()

    async def run_all(self) -> Dict[str, CheckResult]:
        """Execute every registered check."""
        return await self.run(self.registry.list())

    async def run_one(self, name: str) -> Optional[CheckResult]:
        """Execute a single check by name. None if it is not registered."""
        config = self.registry.get(name)
        if config is None:
            return None
        results = await self.run([config])
        return results[name]

    async def run(self, configs: List[CheckConfig]) -> Dict[str, CheckResult]:
        """
        Execute the given checks concurrently.

        Returns:
            Mapping of check name to result, in the order of configs
        """
        if not configs:
            return {}

        semaphore = asyncio.Semaphore(self.max_concurrent) if self.max_concurrent else None
        contexts: Dict[str, CheckContext] = {}
        tasks: Dict[str, asyncio.Task] = {
            config.name: asyncio.create_task(
                self._execute_check(config, semaphore, contexts),
                name=f"health-check:{config.name}",
            )
            for config in configs
        }

        ceiling = self._ceiling(configs)
        try:
            _, pending = await asyncio.wait(tasks.values(), timeout=ceiling)
        except asyncio.CancelledError:
            logger.info(f"Health check run cancelled, abandoning {len(tasks)} checks")
            self._abandon(tasks.values(), contexts.values())
            raise

        results: Dict[str, CheckResult] = {}
        for config in configs:
            task = tasks[config.name]
            if task in pending:
                timeout = config.effective_timeout(self.default_timeout)
                logger.warning(
                    f"Health check {config.name} unfinished at overall ceiling ({ceiling:g}s)"
                )
                results[config.name] = CheckResult.from_exception(
                    CheckTimeoutError(config.name, min(timeout, ceiling)),
                    duration_ms=ceiling * 1000,
                )
            else:
                results[config.name] = task.result()

        if pending:
            self._abandon(pending, contexts.values())

        return results

    def close(self) -> None:
        """Signal every still-running sync check to stop. Does not join threads."""
        with self._running_lock:
            running = list(self._running)
        for ctx in running:
            ctx.cancel()
        if running:
            logger.info(f"Signalled {len(running)} running sync checks to stop")

    def _ceiling(self, configs: List[CheckConfig]) -> float:
        if self.max_wait:
            return self.max_wait
        longest = max(c.effective_timeout(self.default_timeout) for c in configs)
        return longest + CEILING_GRACE_SECONDS

    @staticmethod
    def _abandon(tasks, contexts) -> None:
        for ctx in contexts:
            ctx.cancel()
        for task in tasks:
            if not task.done():
                task.cancel()
                task.add_done_callback(_discard_outcome)

    async def _execute_check(
        self,
        config: CheckConfig,
        semaphore: Optional[asyncio.Semaphore],
        contexts: Dict[str, CheckContext],
    ) -> CheckResult:
        if semaphore is None:
            return await self._execute_bounded(config, contexts)
        async with semaphore:
            return await self._execute_bounded(config, contexts)

    async def _execute_bounded(
        self,
        config: CheckConfig,
        contexts: Dict[str, CheckContext],
    ) -> CheckResult:
        """Execute a single check and wait at most its own timeout."""
        # Tasks copy the current context, so async checks inherit check_name too
        with log_context(check_name=config.name):
            return await self._execute_with_deadline(config, contexts)

    async def _execute_with_deadline(
        self,
        config: CheckConfig,
        contexts: Dict[str, CheckContext],
    ) -> CheckResult:
        timeout = config.effective_timeout(self.default_timeout)
        ctx = CheckContext(config.name, timeout)
        contexts[config.name] = ctx
        start_time = time.monotonic()

        try:
            future = self._start(config, ctx)
        except Exception as e:
            # e.g. the callable does not accept a context argument
            logger.error(f"Health check {config.name} could not start: {e}")
            return CheckResult.from_exception(CheckFailureError(config.name, e))

        try:
            done, _ = await asyncio.wait({future}, timeout=timeout)
        except asyncio.CancelledError:
            ctx.cancel()
            future.cancel()
            future.add_done_callback(_discard_outcome)
            raise

        duration_ms = (time.monotonic() - start_time) * 1000

        if not done:
            ctx.cancel()
            future.cancel()
            future.add_done_callback(_discard_outcome)
            logger.warning(
                f"Health check {config.name} timed out after {timeout:g}s"
            )
            return CheckResult.from_exception(
                CheckTimeoutError(config.name, timeout),
                duration_ms=duration_ms,
            )

        if future.cancelled():
            logger.warning(f"Health check {config.name} was cancelled")
            return CheckResult.down("check was cancelled", kind="cancelled", duration_ms=duration_ms)

        error = future.exception()
        if error is None:
            logger.debug(f"Health check {config.name}: up ({duration_ms:.1f}ms)")
            return CheckResult.up(duration_ms=duration_ms)

        failure = CheckFailureError(config.name, error)
        logger.warning(
            f"Health check {config.name} failed: {failure} ({duration_ms:.1f}ms)"
        )
        return CheckResult.from_exception(failure, duration_ms=duration_ms)

    def _start(self, config: CheckConfig, ctx: CheckContext) -> asyncio.Future:
        if _is_async_check(config.check):
            return asyncio.ensure_future(config.check(ctx))
        return asyncio.ensure_future(self._run_sync(config, ctx))

    async def _run_sync(self, config: CheckConfig, ctx: CheckContext) -> None:
        result = await self._start_thread(config, ctx)
        if inspect.isawaitable(result):
            # Plain callable that handed back a coroutine: run it here
            await result

    def _start_thread(self, config: CheckConfig, ctx: CheckContext) -> asyncio.Future:
        """Run a sync check on its own daemon thread; the future settles on the loop."""
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        def settle(result: Any, error: Optional[BaseException]) -> None:
            if future.done():
                return
            if error is not None:
                future.set_exception(error)
            else:
                future.set_result(result)

        def target() -> None:
            result, error = None, None
            try:
                with log_context(check_name=config.name):
                    result = config.check(ctx)
            except Exception as e:
                error = e
            finally:
                with self._running_lock:
                    self._running.discard(ctx)

            try:
                loop.call_soon_threadsafe(settle, result, error)
            except RuntimeError:
                # Loop already closed: the check was abandoned long ago
                logger.debug(f"Health check {config.name} finished after its run ended")

        with self._running_lock:
            self._running.add(ctx)
        threading.Thread(
            target=target,
            name=f"health-check:{config.name}",
            daemon=True,
        ).start()
        return future


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "HealthCheckExecutor",
    "CEILING_GRACE_SECONDS",
]
