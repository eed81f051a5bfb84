# ============================================================================
# HEALTH CHECK PLUGINS
# ============================================================================
# EPOCH: 1 - STARTUP READINESS
# STATUS: Infrastructure - Health check implementations
# PURPOSE: Ready-made dependency checks for startup validation
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Plugins

- CallableCheck: wrap any sync/async function
- PostgresCheck: PostgreSQL connectivity (psycopg)
- RedisCheck: Redis PING (redis-py asyncio client)
- UrlGroupCheck: HTTP endpoint group reachability (httpx)

These are registered explicitly, usually through HealthChecksBuilder:
    hc.add_postgres(dsn, name="SQL:MainDb")
"""

from health.checks.callable import CallableCheck
from health.checks.cache import RedisCheck
from health.checks.database import PostgresCheck, get_connection_string
from health.checks.http import UrlGroupCheck

__all__ = [
    "CallableCheck",
    "PostgresCheck",
    "RedisCheck",
    "UrlGroupCheck",
    "get_connection_string",
]
