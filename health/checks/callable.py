# ============================================================================
# CALLABLE HEALTH CHECK
# ============================================================================
# EPOCH: 1 - STARTUP READINESS
# STATUS: Infrastructure - Function-backed health check
# PURPOSE: Turn a plain sync/async function into a health check plugin
# CREATED: 19 OCT 2026
# ============================================================================
"""
Callable Health Check

The wrapped function may return:
- HealthCheckResult: used as-is
- bool: True is healthy, False is unhealthy
- None: healthy

Sync functions run in a worker thread so they cannot block the loop.
"""

import asyncio
import inspect
import logging

from health.core import HealthCheckPlugin, HealthCheckResult

logger = logging.getLogger(__name__)


class CallableCheck(HealthCheckPlugin):
    """Health check that delegates to a function."""

    def __init__(self, name: str, fn, timeout_seconds: float = 10.0):
        self.name = name
        self.fn = fn
        self.timeout_seconds = timeout_seconds

    async def check(self) -> HealthCheckResult:
        if inspect.iscoroutinefunction(self.fn):
            outcome = await self.fn()
        else:
            outcome = await asyncio.to_thread(self.fn)
            if inspect.isawaitable(outcome):
                outcome = await outcome

        if isinstance(outcome, HealthCheckResult):
            return outcome
        if outcome is None or outcome is True:
            return HealthCheckResult.healthy()
        if outcome is False:
            return HealthCheckResult.unhealthy(f"{self.name} reported not ready")

        raise TypeError(
            f"Check function for {self.name} returned {type(outcome).__name__}"
        )


__all__ = [
    "CallableCheck",
]
