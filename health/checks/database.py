# ============================================================================
# DATABASE HEALTH CHECKS
# ============================================================================
# EPOCH: 1 - STARTUP READINESS
# STATUS: Infrastructure - PostgreSQL connectivity check
# PURPOSE: Verify a database answers a trivial query before startup
# CREATED: 19 OCT 2026
# ============================================================================
"""
Database Health Checks

- PostgresCheck: opens a psycopg async connection and runs a probe query

Connection string resolution (get_connection_string):
1. DATABASE_URL environment variable
2. Individual POSTGRES_* components
"""

import os
import logging
from typing import Optional

import psycopg
from psycopg import AsyncConnection

from health.core import (
    FailureCause,
    HealthCheckPlugin,
    HealthCheckResult,
)

logger = logging.getLogger(__name__)


def get_connection_string() -> str:
    """
    Get database connection string from environment.

    Returns:
        PostgreSQL connection string
    """
    if url := os.environ.get("DATABASE_URL"):
        return url

    host = os.environ.get("POSTGRES_HOST", "localhost")
    port = os.environ.get("POSTGRES_PORT", "5432")
    name = os.environ.get("POSTGRES_DB", "postgres")
    user = os.environ.get("POSTGRES_USER", "postgres")
    password = os.environ.get("POSTGRES_PASSWORD", "")
    sslmode = os.environ.get("POSTGRES_SSLMODE", "prefer")

    return f"postgresql://{user}:{password}@{host}:{port}/{name}?sslmode={sslmode}"


class PostgresCheck(HealthCheckPlugin):
    """
    PostgreSQL connectivity health check.

    Healthy when the probe query returns at least one row.
    """

    def __init__(
        self,
        conninfo: Optional[str] = None,
        name: str = "postgres",
        query: str = "SELECT 1",
        timeout_seconds: float = 5.0,
    ):
        self.conninfo = conninfo
        self.name = name
        self.query = query
        self.timeout_seconds = timeout_seconds

    async def check(self) -> HealthCheckResult:
        conninfo = self.conninfo or get_connection_string()

        try:
            async with await AsyncConnection.connect(
                conninfo,
                connect_timeout=max(1, int(self.timeout_seconds)),
                autocommit=True,
            ) as conn:
                cursor = await conn.execute(self.query)
                row = await cursor.fetchone()

        except psycopg.Error as e:
            logger.debug(f"PostgreSQL check {self.name} failed: {e}")
            return HealthCheckResult.unhealthy(
                f"PostgreSQL connection failed: {e}",
                failure=FailureCause.from_exception(e),
            )

        if row is None:
            return HealthCheckResult.unhealthy(
                "PostgreSQL probe query returned no rows",
                query=self.query,
            )

        return HealthCheckResult.healthy("PostgreSQL connected")


__all__ = [
    "PostgresCheck",
    "get_connection_string",
]
