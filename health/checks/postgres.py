# ============================================================================
# POSTGRES HEALTH CHECK
# ============================================================================
# STATUS: Infrastructure - PostgreSQL connectivity probe
# PURPOSE: Connect, run a trivial query, disconnect
# CREATED: 12 OCT 2026
# ============================================================================
"""
PostgreSQL Health Check

Opens a fresh connection (so a broken pool cannot mask an outage),
runs SELECT VERSION() and closes the connection.

    postgres_check("postgresql://user:pass@db:5432/app?sslmode=disable")
"""

import psycopg

from core.logging import ComponentType, get_logger
from health.core import CheckContext

logger = get_logger(__name__, ComponentType.PROBE)

# libpq rounds connect_timeout below 2 seconds up to 2
MIN_CONNECT_TIMEOUT = 2


class PostgresCheckError(Exception):
    """Query succeeded but returned nothing."""
    pass


def postgres_check(dsn: str):
    """
    Create a PostgreSQL connectivity check.

    Args:
        dsn: libpq connection string or URL

    Returns:
        Async check function
    """
    async def check(ctx: CheckContext) -> None:
        connect_timeout = max(MIN_CONNECT_TIMEOUT, int(ctx.remaining()))
        conn = await psycopg.AsyncConnection.connect(dsn, connect_timeout=connect_timeout)
        async with conn:
            cursor = await conn.execute("SELECT VERSION()")
            row = await cursor.fetchone()

        if not row:
            raise PostgresCheckError("SELECT VERSION() returned no rows")

        logger.debug(f"Postgres check {ctx.name}: {row[0]}")

    check.__name__ = "postgres_check"
    return check


__all__ = [
    "postgres_check",
    "PostgresCheckError",
]
