# ============================================================================
# CACHE HEALTH CHECKS
# ============================================================================
# EPOCH: 1 - STARTUP READINESS
# STATUS: Infrastructure - Redis connectivity check
# PURPOSE: Verify a Redis server answers PING before startup
# CREATED: 19 OCT 2026
# ============================================================================
"""
Cache Health Checks

- RedisCheck: PING through a short-lived redis.asyncio client

The URL follows redis-py's from_url format (redis://, rediss://, unix://).
When no URL is given, REDIS_URL is read at check time.
"""

import os
import logging
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from health.core import (
    FailureCause,
    HealthCheckPlugin,
    HealthCheckResult,
)

logger = logging.getLogger(__name__)


class RedisCheck(HealthCheckPlugin):
    """
    Redis connectivity health check.

    Healthy when PING is acknowledged.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        name: str = "redis",
        timeout_seconds: float = 5.0,
    ):
        self.url = url
        self.name = name
        self.timeout_seconds = timeout_seconds

    async def check(self) -> HealthCheckResult:
        url = self.url or os.environ.get("REDIS_URL", "redis://localhost:6379/0")

        client = redis.from_url(
            url,
            socket_connect_timeout=self.timeout_seconds,
            socket_timeout=self.timeout_seconds,
        )
        try:
            pong = await client.ping()
        except RedisError as e:
            logger.debug(f"Redis check {self.name} failed: {e}")
            return HealthCheckResult.unhealthy(
                f"Redis connection failed: {e}",
                failure=FailureCause.from_exception(e),
            )
        finally:
            await client.aclose()

        if not pong:
            return HealthCheckResult.unhealthy("Redis did not acknowledge PING")

        return HealthCheckResult.healthy("Redis connected")


__all__ = [
    "RedisCheck",
]
