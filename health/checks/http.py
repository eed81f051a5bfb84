# ============================================================================
# HTTP HEALTH CHECKS
# ============================================================================
# EPOCH: 1 - STARTUP READINESS
# STATUS: Infrastructure - Remote endpoint reachability
# PURPOSE: Verify that a group of URLs all answer with a success status
# CREATED: 19 OCT 2026
# ============================================================================
"""
HTTP Health Checks

- UrlGroupCheck: GET every URL in the group; healthy only if all return 2xx

One failing URL makes the whole group unhealthy. The description lists
each failing URL so the startup diagnostics show which endpoint is down.
"""

import logging
from typing import Iterable, List, Optional

import httpx

from health.core import (
    FailureCause,
    HealthCheckPlugin,
    HealthCheckResult,
)

logger = logging.getLogger(__name__)


class UrlGroupCheck(HealthCheckPlugin):
    """
    URL group health check.

    Args:
        urls: Endpoints to probe
        name: Check name
        timeout_seconds: Check timeout (also used as the HTTP timeout)
        transport: Optional httpx transport (tests use httpx.MockTransport)
    """

    def __init__(
        self,
        urls: Iterable[str],
        name: str = "url_group",
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.urls: List[str] = list(urls)
        if not self.urls:
            raise ValueError("UrlGroupCheck needs at least one URL")
        self.name = name
        self.timeout_seconds = timeout_seconds
        self.transport = transport

    async def check(self) -> HealthCheckResult:
        failures: List[str] = []
        last_error: Optional[FailureCause] = None

        async with httpx.AsyncClient(
            timeout=self.timeout_seconds,
            transport=self.transport,
        ) as client:
            for url in self.urls:
                try:
                    response = await client.get(url)
                except httpx.HTTPError as e:
                    failures.append(f"{url}: {type(e).__name__}: {e}")
                    last_error = FailureCause.from_exception(e)
                    continue

                if not response.is_success:
                    failures.append(f"{url}: status {response.status_code}")

        if failures:
            return HealthCheckResult.unhealthy(
                "; ".join(failures),
                failure=last_error,
                urls=self.urls,
            )

        return HealthCheckResult.healthy(
            f"{len(self.urls)} endpoint(s) reachable",
            urls=self.urls,
        )


__all__ = [
    "UrlGroupCheck",
]
