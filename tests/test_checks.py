# ============================================================================
# BUILT-IN PROBE TESTS
# ============================================================================
# STATUS: Tests - HTTP and PostgreSQL probes
# PURPOSE: Verify probe success/failure mapping through the executor
# CREATED: 12 OCT 2026
# ============================================================================
"""
Built-in Probe Tests

Covers:
1. http_check: 2xx/4xx up, 5xx down, connection errors down
2. http_check: request timeout defaults to the context's remaining time
3. postgres_check: SELECT VERSION() success, empty result, connect failure

HTTP uses httpx.MockTransport; PostgreSQL is mocked.

Run with:
    pytest tests/test_checks.py -v
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import psycopg
import pytest

from health.checks import http_check, postgres_check, HTTPCheckError, PostgresCheckError
from health.core import CheckConfig, CheckContext, CheckStatus
from health.executor import HealthCheckExecutor
from health.registry import HealthCheckRegistry


def _run(check, timeout=1.0):
    registry = HealthCheckRegistry()
    registry.register(CheckConfig(name="probe", check=check, timeout=timeout))
    executor = HealthCheckExecutor(registry=registry)
    return asyncio.run(executor.run_all())["probe"]


def _transport(status_code=200, exc=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if exc is not None:
            raise exc
        return httpx.Response(status_code, json={"status": "ok"})
    return httpx.MockTransport(handler)


# ============================================================================
# HTTP
# ============================================================================

class TestHTTPCheck:
    """http_check."""

    @pytest.mark.parametrize("status_code", [200, 204, 301, 404])
    def test_non_server_error_is_up(self, status_code):
        check = http_check("http://svc/ping", transport=_transport(status_code))
        assert _run(check).status == CheckStatus.UP

    @pytest.mark.parametrize("status_code", [500, 502, 503])
    def test_server_error_is_down(self, status_code):
        check = http_check("http://svc/ping", transport=_transport(status_code))
        result = _run(check)

        assert result.status == CheckStatus.DOWN
        assert result.error_kind == "HTTPCheckError"
        assert str(status_code) in result.error

    def test_connection_error_is_down(self):
        exc = httpx.ConnectError("connection refused")
        check = http_check("http://svc/ping", transport=_transport(exc=exc))
        result = _run(check)

        assert result.status == CheckStatus.DOWN
        assert result.error_kind == "ConnectError"

    def test_raises_directly(self):
        check = http_check("http://svc/ping", transport=_transport(500))
        ctx = CheckContext("probe", timeout=1.0)

        with pytest.raises(HTTPCheckError) as exc_info:
            asyncio.run(check(ctx))

        assert exc_info.value.status_code == 500

    def test_method_and_headers_sent(self):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["auth"] = request.headers.get("authorization")
            return httpx.Response(200)

        check = http_check(
            "http://svc/aliveness",
            method="HEAD",
            headers={"Authorization": "Basic Z3Vlc3Q6Z3Vlc3Q="},
            transport=httpx.MockTransport(handler),
        )
        assert _run(check).status == CheckStatus.UP
        assert seen == {"method": "HEAD", "auth": "Basic Z3Vlc3Q6Z3Vlc3Q="}


# ============================================================================
# POSTGRES
# ============================================================================

def _mock_connection(row=("PostgreSQL 16.2",)):
    cursor = MagicMock()
    cursor.fetchone = AsyncMock(return_value=row)
    conn = MagicMock()
    conn.__aenter__ = AsyncMock(return_value=conn)
    conn.__aexit__ = AsyncMock(return_value=False)
    conn.execute = AsyncMock(return_value=cursor)
    return conn


class TestPostgresCheck:
    """postgres_check."""

    def test_query_success_is_up(self):
        conn = _mock_connection()
        with patch.object(psycopg.AsyncConnection, "connect", AsyncMock(return_value=conn)) as connect:
            result = _run(postgres_check("postgresql://test@db/test"), timeout=5.0)

        assert result.status == CheckStatus.UP
        conn.execute.assert_awaited_once_with("SELECT VERSION()")
        args, kwargs = connect.call_args
        assert args == ("postgresql://test@db/test",)
        assert kwargs["connect_timeout"] >= 2

    def test_empty_result_is_down(self):
        conn = _mock_connection(row=None)
        with patch.object(psycopg.AsyncConnection, "connect", AsyncMock(return_value=conn)):
            result = _run(postgres_check("postgresql://test@db/test"))

        assert result.status == CheckStatus.DOWN
        assert result.error_kind == PostgresCheckError.__name__

    def test_connect_failure_is_down(self):
        failure = AsyncMock(side_effect=psycopg.OperationalError("connection refused"))
        with patch.object(psycopg.AsyncConnection, "connect", failure):
            result = _run(postgres_check("postgresql://test@db/test"))

        assert result.status == CheckStatus.DOWN
        assert "connection refused" in result.error
        assert result.error_kind == "OperationalError"
