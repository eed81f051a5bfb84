# ============================================================================
# STARTUP HEALTH CHECK RUNNER
# ============================================================================
# EPOCH: 1 - STARTUP READINESS
# STATUS: Core - Retry loop gating application startup
# PURPOSE: Probe dependencies until healthy or the attempt budget runs out
# CREATED: 19 OCT 2026
# ============================================================================
"""
Startup Health Check Runner

Attempt loop (attempts numbered 1..retry_count, strictly sequential):

    probe ──healthy──────────────────────────────> return
      │
      └─not healthy─┬─ attempts left ─> notice, sleep(delay) ─> probe
                    │
                    └─ final attempt ─> error notice, one diagnostic
                                        per check, raise StartupHealthCheckError

Terminal outcomes:
- return: every dependency reported healthy
- StartupHealthCheckError: budget exhausted, carries the last result
- HealthProberError: the prober itself raised; no further attempts
- asyncio.CancelledError: caller cancelled (task or cancel_event)

The runner holds no state between runs; one instance can be reused.
"""

import asyncio
from typing import Awaitable, Callable, Optional, Protocol, TypeVar

from core.logging import ComponentType, get_logger, log_context
from health.core import AggregatedHealthResult, HealthStatus
from health.notices import CheckDiagnostic, LoggingNoticeSink, NoticeSink
from health.options import HealthCheckRunnerOptions

logger = get_logger(__name__, ComponentType.RUNNER)

T = TypeVar("T")


# ============================================================================
# ERRORS
# ============================================================================

class StartupAbortedError(RuntimeError):
    """Base for every condition that must stop the application starting."""


class StartupHealthCheckError(StartupAbortedError):
    """All attempts used without reaching a healthy aggregate status."""

    def __init__(self, result: AggregatedHealthResult, attempts: int):
        super().__init__(
            f"Startup health check failed after {attempts} attempt(s). "
            f"Application cannot start."
        )
        self.result = result
        self.attempts = attempts

    @property
    def failing_checks(self):
        return sorted(self.result.failing_entries())


class HealthProberError(StartupAbortedError):
    """The prober raised instead of returning a result."""

    def __init__(self, attempt: int, cause: BaseException):
        super().__init__(
            f"Health prober failed on attempt {attempt}: "
            f"{type(cause).__name__}: {cause}"
        )
        self.attempt = attempt


# ============================================================================
# PROBER CONTRACT
# ============================================================================

class HealthProber(Protocol):
    """Runs every registered check once. HealthCheckExecutor implements this."""

    async def check_all(
        self,
        timeout_seconds: Optional[float] = None,
        max_parallelism: Optional[int] = None,
    ) -> AggregatedHealthResult: ...


# ============================================================================
# RUNNER
# ============================================================================

class StartupHealthCheckRunner:
    """
    Drives the aggregate prober through a fixed-delay retry loop.

    Args:
        prober: Aggregate prober (usually HealthCheckExecutor)
        sink: Where notices go (defaults to LoggingNoticeSink)
        sleep: Delay coroutine, replaceable in tests
    """

    def __init__(
        self,
        prober: HealthProber,
        sink: Optional[NoticeSink] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.prober = prober
        self.sink = sink if sink is not None else LoggingNoticeSink()
        self._sleep = sleep

    async def run(
        self,
        options: Optional[HealthCheckRunnerOptions] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> AggregatedHealthResult:
        """
        Probe dependencies until healthy or out of attempts.

        Args:
            options: Retry budget and executor hints (defaults if None)
            cancel_event: Setting this aborts the run with CancelledError

        Returns:
            The healthy aggregated result

        Raises:
            StartupHealthCheckError: Still not healthy after the final attempt
            HealthProberError: The prober raised
            asyncio.CancelledError: Run was cancelled
        """
        options = options if options is not None else HealthCheckRunnerOptions()
        retry_count = options.retry_count

        for attempt in range(1, retry_count + 1):
            with log_context(
                attempt=attempt,
                retry_count=retry_count,
                operation="startup_validation",
            ):
                result = await self._probe(attempt, options, cancel_event)

                if result.status == HealthStatus.HEALTHY:
                    self._notify(
                        self.sink.info,
                        "All dependencies are healthy",
                        attempt=attempt,
                        retry_count=retry_count,
                    )
                    return result

                if attempt < retry_count:
                    self._notify(
                        self.sink.info,
                        f"Attempt {attempt}/{retry_count} failed. "
                        f"Retrying in {options.delay_seconds:g}s...",
                        attempt=attempt,
                        retry_count=retry_count,
                        delay_seconds=options.delay_seconds,
                        status=result.status.value,
                    )
                    await self._cancellable(
                        lambda: self._sleep(options.delay_seconds),
                        cancel_event,
                    )
                    continue

                self._report_failure(result, retry_count)
                raise StartupHealthCheckError(result=result, attempts=retry_count)

        # range(1, retry_count + 1) is never empty for retry_count >= 1
        raise AssertionError("unreachable")

    async def _probe(
        self,
        attempt: int,
        options: HealthCheckRunnerOptions,
        cancel_event: Optional[asyncio.Event],
    ) -> AggregatedHealthResult:
        try:
            return await self._cancellable(
                lambda: self.prober.check_all(
                    timeout_seconds=options.timeout_seconds,
                    max_parallelism=options.max_parallelism,
                ),
                cancel_event,
            )
        except Exception as e:
            raise HealthProberError(attempt, e) from e

    def _report_failure(self, result: AggregatedHealthResult, attempts: int) -> None:
        self._notify(
            self.sink.error,
            f"Startup health check failed after {attempts} attempts. "
            f"Application cannot start.",
            retry_count=attempts,
            status=result.status.value,
            failing_checks=sorted(result.failing_entries()),
            health=result.to_dict(),
        )
        for name, entry in result.entries.items():
            self._notify(self.sink.diagnostic, CheckDiagnostic.from_result(name, entry))

    def _notify(self, emit: Callable[..., None], *args, **fields) -> None:
        """Emit a notice; a broken sink never changes the run's outcome."""
        try:
            emit(*args, **fields)
        except Exception:
            logger.exception("Notice sink raised while reporting startup health")

    @staticmethod
    async def _cancellable(
        start: Callable[[], Awaitable[T]],
        cancel_event: Optional[asyncio.Event],
    ) -> T:
        """Await start() unless cancel_event fires first."""
        if cancel_event is None:
            return await start()
        if cancel_event.is_set():
            raise asyncio.CancelledError("Startup health check cancelled")

        work = asyncio.ensure_future(start())
        waiter = asyncio.ensure_future(cancel_event.wait())
        try:
            done, _ = await asyncio.wait(
                {work, waiter},
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            waiter.cancel()
            if not work.done():
                work.cancel()

        if work in done:
            return work.result()

        await asyncio.gather(work, return_exceptions=True)
        raise asyncio.CancelledError("Startup health check cancelled")


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "StartupAbortedError",
    "StartupHealthCheckError",
    "HealthProberError",
    "HealthProber",
    "StartupHealthCheckRunner",
]
