# ============================================================================
# HEALTH CHECK EXECUTOR
# ============================================================================
# EPOCH: 1 - STARTUP READINESS
# STATUS: Infrastructure - Parallel health check execution
# PURPOSE: Run every registered check once and aggregate the outcome
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Executor

Executes health checks with:
- Bounded parallel execution (asyncio.Semaphore)
- Per-check timeouts
- Overall execution timeout
- Result aggregation with 'worst wins' semantics

Failure handling:
- A check that raises becomes an unhealthy entry with its failure cause
- A check that exceeds its own or the overall timeout becomes unhealthy
- Invalid execution bounds raise ValueError (the caller's fault)
- Cancelling the caller cancels every in-flight check
"""

import asyncio
import time
from typing import Dict, Optional

from core.logging import ComponentType, get_logger, log_context
from health.core import (
    HealthStatus,
    HealthCheckResult,
    HealthCheckPlugin,
    AggregatedHealthResult,
)
from health.registry import HealthCheckRegistry, get_registry

logger = get_logger(__name__, ComponentType.EXECUTOR)


class HealthCheckExecutor:
    """
    Executes every registered check concurrently and aggregates the results.

    timeout_seconds bounds one whole run; max_parallelism bounds how many
    checks are in flight at once. Both can be overridden per call.
    """

    def __init__(
        self,
        registry: Optional[HealthCheckRegistry] = None,
        timeout_seconds: float = 10.0,
        max_parallelism: int = 4,
    ):
        """
        Initialize executor.

        Args:
            registry: Health check registry (uses global if None)
            timeout_seconds: Max total execution time of one run
            max_parallelism: Max concurrent checks
        """
        self.registry = registry if registry is not None else get_registry()
        self.timeout_seconds = timeout_seconds
        self.max_parallelism = max_parallelism

    async def check_all(
        self,
        timeout_seconds: Optional[float] = None,
        max_parallelism: Optional[int] = None,
    ) -> AggregatedHealthResult:
        """
        Execute all registered health checks.

        Args:
            timeout_seconds: Override overall timeout for this run
            max_parallelism: Override concurrency bound for this run

        Returns:
            Aggregated result with one entry per registered check

        Raises:
            ValueError: If a bound is not positive
        """
        timeout = self.timeout_seconds if timeout_seconds is None else timeout_seconds
        parallelism = self.max_parallelism if max_parallelism is None else max_parallelism

        if timeout is None or timeout <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {timeout}")
        if parallelism is None or parallelism < 1:
            raise ValueError(f"max_parallelism must be at least 1, got {parallelism}")

        start_time = time.monotonic()
        checks = self.registry.get_all()

        if not checks:
            return AggregatedHealthResult(
                status=HealthStatus.HEALTHY,
                entries={},
                total_duration_ms=0.0,
            )

        semaphore = asyncio.Semaphore(parallelism)

        async def run_with_semaphore(check: HealthCheckPlugin) -> HealthCheckResult:
            async with semaphore:
                return await self._execute_check(check)

        tasks = {
            asyncio.create_task(run_with_semaphore(check)): check
            for check in checks
        }

        try:
            done, pending = await asyncio.wait(tasks, timeout=timeout)
        except asyncio.CancelledError:
            # Caller cancelled: nothing may outlive check_all
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        if pending:
            logger.warning(
                f"Health check run exceeded {timeout}s; "
                f"{len(pending)} check(s) still pending"
            )
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

        entries: Dict[str, HealthCheckResult] = {}
        for task, check in tasks.items():
            if task in pending:
                result = HealthCheckResult.unhealthy(
                    f"Timed out after {timeout}s (overall run timeout)",
                )
                result.duration_ms = (time.monotonic() - start_time) * 1000
            elif task.cancelled():
                result = HealthCheckResult.unhealthy("Check was cancelled")
            else:
                result = task.result()
            entries[check.name] = result

        total_duration_ms = (time.monotonic() - start_time) * 1000
        overall_status = HealthStatus.aggregate(r.status for r in entries.values())

        logger.debug(
            f"Health check run finished: {overall_status.value} "
            f"({len(entries)} checks, {total_duration_ms:.1f}ms)"
        )

        return AggregatedHealthResult(
            status=overall_status,
            entries=entries,
            total_duration_ms=total_duration_ms,
        )

    async def check_one(
        self,
        name: str,
    ) -> Optional[HealthCheckResult]:
        """Execute a single check by name."""
        check = self.registry.get(name)
        if check is None:
            return None

        return await self._execute_check(check)

    async def _execute_check(
        self,
        check: HealthCheckPlugin,
    ) -> HealthCheckResult:
        """Execute a single check with its own timeout."""
        start_time = time.monotonic()

        with log_context(check_name=check.name):
            try:
                result = await asyncio.wait_for(
                    check.check(),
                    timeout=check.timeout_seconds,
                )

                if not isinstance(result, HealthCheckResult):
                    raise TypeError(
                        f"check() returned {type(result).__name__}, "
                        f"expected HealthCheckResult"
                    )

            except asyncio.TimeoutError:
                logger.warning(
                    f"Health check {check.name} timed out after {check.timeout_seconds}s"
                )
                result = HealthCheckResult.unhealthy(
                    f"Timed out after {check.timeout_seconds}s"
                )

            except Exception as e:
                logger.error(f"Health check {check.name} failed: {e}")
                result = HealthCheckResult.from_exception(e)

            result.duration_ms = (time.monotonic() - start_time) * 1000

            logger.debug(
                f"Health check {check.name}: {result.status.value} "
                f"({result.duration_ms:.1f}ms)"
            )

        return result


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "HealthCheckExecutor",
]
