# ============================================================================
# HEALTH CHECK ROUTER
# ============================================================================
# STATUS: Infrastructure - FastAPI health check endpoints
# PURPOSE: Expose the aggregate health report over HTTP
# CREATED: 12 OCT 2026
# ============================================================================
"""
Health Check Router

Endpoints:
    GET /livez                      - Process alive (no checks executed)
    GET <status_path>               - Aggregate report of all checks
    GET <status_path>/{check_name}  - Run a single check

Response Codes (monitoring systems act on these alone):
    200 - healthy
    200 - partiallyUnhealthy (only skip_on_err checks are down)
    503 - unhealthy
    404 - unknown check name (single check endpoint)

Bodies are always JSON. Check failures never produce a 500.

If the client disconnects while checks are running, the handler stops
waiting and the in-flight checks are abandoned (a shared cached refresh
keeps running for other callers).
"""

import asyncio
import uuid
from typing import TYPE_CHECKING, Any, Awaitable, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from __version__ import __version__, BUILD_DATE
from core.logging import ComponentType, get_logger, log_context
from health.core import CheckStatus, OverallStatus, rfc3339, utcnow
from health.schemas import ErrorResponse, HealthReportResponse, LivenessResponse, CheckResultResponse

if TYPE_CHECKING:
    from health.service import HealthService

logger = get_logger(__name__, ComponentType.API)

# How often a waiting handler looks for a client disconnect
DISCONNECT_POLL_SECONDS = 0.25

# Caller-supplied correlation id, echoed back and attached to every log line
REQUEST_ID_HEADER = "X-Request-ID"


def _request_id(request: Request) -> str:
    return request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]


async def _until_disconnected(request: Request) -> None:
    while not await request.is_disconnected():
        await asyncio.sleep(DISCONNECT_POLL_SECONDS)


async def run_unless_disconnected(request: Request, work: Awaitable[Any]) -> Optional[Any]:
    """
    Await work, giving up if the client disconnects first.

    Returns:
        The result of work, or None when the client went away
    """
    work_task = asyncio.ensure_future(work)
    watcher = asyncio.ensure_future(_until_disconnected(request))
    try:
        done, _ = await asyncio.wait(
            {work_task, watcher},
            return_when=asyncio.FIRST_COMPLETED,
        )
    finally:
        watcher.cancel()
        if not work_task.done():
            work_task.cancel()

    if work_task in done:
        return work_task.result()

    logger.info(f"Client disconnected from {request.url.path}, abandoning health checks")
    return None


def _unavailable(error: str, request_id: str) -> JSONResponse:
    return JSONResponse(
        status_code=503,
        headers={REQUEST_ID_HEADER: request_id},
        content={
            "status": OverallStatus.UNHEALTHY.value,
            "timestamp": rfc3339(utcnow()),
            "details": {},
            "error": error,
        },
    )


def build_health_router(service: "HealthService") -> APIRouter:
    """
    Build the health router for a service.

    Args:
        service: HealthService providing reports and single-check runs

    Returns:
        APIRouter with liveness, status and single-check endpoints
    """
    router = APIRouter(tags=["Health"])
    status_path = service.settings.status_path.rstrip("/") or "/"
    check_path = f"{status_path.rstrip('/')}/{{check_name}}"

    # ========================================================================
    # LIVENESS PROBE
    # ========================================================================

    @router.get("/livez", response_model=LivenessResponse)
    async def liveness_probe():
        """
        Liveness probe.

        Returns 200 if the process is alive. No checks are executed.
        """
        return {"status": "alive", "version": __version__, "build_date": BUILD_DATE}

    # ========================================================================
    # AGGREGATE STATUS
    # ========================================================================

    @router.get(
        status_path,
        response_model=HealthReportResponse,
        responses={503: {"model": HealthReportResponse}},
    )
    async def health_status(request: Request):
        """
        Aggregate health status.

        Runs (or serves the cached result of) every registered check.

        Returns:
            200: healthy or partiallyUnhealthy
            503: unhealthy
        """
        request_id = _request_id(request)
        headers = {REQUEST_ID_HEADER: request_id}
        with log_context(request_id=request_id):
            try:
                report = await run_unless_disconnected(request, service.report())
            except Exception as e:
                logger.exception(f"Health report failed: {e}")
                return _unavailable(f"health report failed: {e}", request_id)

        if report is None:
            return _unavailable("request abandoned", request_id)

        return JSONResponse(
            status_code=report.http_status,
            content=report.to_dict(),
            headers=headers,
        )

    # ========================================================================
    # SINGLE CHECK
    # ========================================================================

    @router.get(
        check_path,
        response_model=CheckResultResponse,
        responses={404: {"model": ErrorResponse}, 503: {"model": CheckResultResponse}},
    )
    async def single_check(check_name: str, request: Request):
        """
        Run a single health check by name.

        Useful for debugging specific dependencies.
        """
        request_id = _request_id(request)
        headers = {REQUEST_ID_HEADER: request_id}
        if check_name not in service.registry:
            return JSONResponse(
                status_code=404,
                content={"error": f"Health check not found: {check_name}"},
                headers=headers,
            )

        with log_context(request_id=request_id):
            result = await run_unless_disconnected(request, service.check_one(check_name))
        if result is None:
            return _unavailable("request abandoned", request_id)

        http_code = 200 if result.status == CheckStatus.UP else 503
        return JSONResponse(status_code=http_code, content=result.to_dict(), headers=headers)

    return router


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "build_health_router",
    "run_unless_disconnected",
    "DISCONNECT_POLL_SECONDS",
    "REQUEST_ID_HEADER",
]
