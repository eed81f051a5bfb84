# ============================================================================
# HEALTH CHECK EXECUTOR TESTS
# ============================================================================
# EPOCH: 1 - STARTUP READINESS
# STATUS: Tests - Aggregate prober
# PURPOSE: Verify aggregation, timeouts, parallelism bound, and fault handling
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Executor Tests

Run with:
    pytest tests/test_executor.py -v
"""

import asyncio
import pytest

from health.core import HealthCheckPlugin, HealthCheckResult, HealthStatus
from health.executor import HealthCheckExecutor
from health.registry import HealthCheckRegistry


# ============================================================================
# HELPERS
# ============================================================================

class StaticCheck(HealthCheckPlugin):
    def __init__(self, name, result, delay=0.0, timeout_seconds=5.0):
        self.name = name
        self.result = result
        self.delay = delay
        self.timeout_seconds = timeout_seconds

    async def check(self) -> HealthCheckResult:
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.result


class RaisingCheck(HealthCheckPlugin):
    name = "raising"

    async def check(self) -> HealthCheckResult:
        raise ConnectionError("refused")


class ConcurrencyProbe(HealthCheckPlugin):
    """Tracks how many instances run at the same time."""

    def __init__(self, name, tracker):
        self.name = name
        self.tracker = tracker

    async def check(self) -> HealthCheckResult:
        self.tracker["active"] += 1
        self.tracker["peak"] = max(self.tracker["peak"], self.tracker["active"])
        await asyncio.sleep(0.02)
        self.tracker["active"] -= 1
        return HealthCheckResult.healthy()


def _executor(*checks, **kwargs):
    registry = HealthCheckRegistry()
    for check in checks:
        registry.register(check)
    return HealthCheckExecutor(registry=registry, **kwargs)


# ============================================================================
# AGGREGATION
# ============================================================================

class TestAggregation:

    def test_empty_registry_is_healthy(self):
        result = asyncio.run(_executor().check_all())
        assert result.status == HealthStatus.HEALTHY
        assert result.entries == {}

    def test_all_healthy(self):
        executor = _executor(
            StaticCheck("a", HealthCheckResult.healthy("ok")),
            StaticCheck("b", HealthCheckResult.healthy("ok")),
        )
        result = asyncio.run(executor.check_all())
        assert result.status == HealthStatus.HEALTHY
        assert set(result.entries) == {"a", "b"}

    def test_worst_status_wins(self):
        executor = _executor(
            StaticCheck("a", HealthCheckResult.healthy()),
            StaticCheck("b", HealthCheckResult.degraded("slow")),
            StaticCheck("c", HealthCheckResult.unhealthy("down")),
        )
        result = asyncio.run(executor.check_all())
        assert result.status == HealthStatus.UNHEALTHY
        assert set(result.failing_entries()) == {"b", "c"}

    def test_degraded_without_unhealthy(self):
        executor = _executor(
            StaticCheck("a", HealthCheckResult.healthy()),
            StaticCheck("b", HealthCheckResult.degraded("slow")),
        )
        result = asyncio.run(executor.check_all())
        assert result.status == HealthStatus.DEGRADED

    def test_durations_recorded(self):
        executor = _executor(
            StaticCheck("a", HealthCheckResult.healthy(), delay=0.01),
        )
        result = asyncio.run(executor.check_all())
        assert result.entries["a"].duration_ms > 0
        assert result.total_duration_ms > 0


# ============================================================================
# FAILURES
# ============================================================================

class TestCheckFailures:

    def test_exception_becomes_unhealthy_entry(self):
        result = asyncio.run(_executor(RaisingCheck()).check_all())

        entry = result.entries["raising"]
        assert result.status == HealthStatus.UNHEALTHY
        assert entry.status == HealthStatus.UNHEALTHY
        assert entry.failure.message == "refused"
        assert entry.failure.exception_type == "ConnectionError"
        assert "ConnectionError" in entry.failure.trace

    def test_wrong_return_type_becomes_unhealthy(self):
        executor = _executor(StaticCheck("bad", "healthy"))
        result = asyncio.run(executor.check_all())
        assert result.entries["bad"].status == HealthStatus.UNHEALTHY
        assert result.entries["bad"].failure.exception_type == "TypeError"

    def test_per_check_timeout(self):
        executor = _executor(
            StaticCheck("slow", HealthCheckResult.healthy(), delay=1.0, timeout_seconds=0.05),
            StaticCheck("fast", HealthCheckResult.healthy()),
        )
        result = asyncio.run(executor.check_all(timeout_seconds=5))

        assert result.entries["slow"].status == HealthStatus.UNHEALTHY
        assert "Timed out after 0.05s" in result.entries["slow"].description
        assert result.entries["fast"].status == HealthStatus.HEALTHY

    def test_overall_timeout(self):
        executor = _executor(
            StaticCheck("slow", HealthCheckResult.healthy(), delay=2.0, timeout_seconds=10),
            StaticCheck("fast", HealthCheckResult.healthy()),
        )
        result = asyncio.run(executor.check_all(timeout_seconds=0.1))

        assert result.status == HealthStatus.UNHEALTHY
        assert "overall run timeout" in result.entries["slow"].description
        assert result.entries["fast"].status == HealthStatus.HEALTHY


# ============================================================================
# BOUNDS
# ============================================================================

class TestBounds:

    def test_parallelism_bound_respected(self):
        tracker = {"active": 0, "peak": 0}
        checks = [ConcurrencyProbe(f"c{i}", tracker) for i in range(6)]

        asyncio.run(_executor(*checks).check_all(max_parallelism=2))

        assert tracker["peak"] == 2

    def test_constructor_bounds_used_by_default(self):
        tracker = {"active": 0, "peak": 0}
        checks = [ConcurrencyProbe(f"c{i}", tracker) for i in range(4)]

        asyncio.run(_executor(*checks, max_parallelism=1).check_all())

        assert tracker["peak"] == 1

    @pytest.mark.parametrize("kwargs", [
        {"timeout_seconds": 0},
        {"timeout_seconds": -1},
        {"max_parallelism": 0},
    ])
    def test_invalid_bounds_raise(self, kwargs):
        executor = _executor(StaticCheck("a", HealthCheckResult.healthy()))
        with pytest.raises(ValueError):
            asyncio.run(executor.check_all(**kwargs))


# ============================================================================
# SINGLE CHECK & CANCELLATION
# ============================================================================

class TestSingleAndCancel:

    def test_check_one(self):
        executor = _executor(StaticCheck("a", HealthCheckResult.degraded("meh")))
        result = asyncio.run(executor.check_one("a"))
        assert result.status == HealthStatus.DEGRADED

    def test_check_one_unknown(self):
        assert asyncio.run(_executor().check_one("missing")) is None

    def test_cancellation_cancels_checks(self):
        cancelled = []

        class Blocking(HealthCheckPlugin):
            name = "blocking"
            timeout_seconds = 30

            async def check(self):
                try:
                    await asyncio.sleep(30)
                except asyncio.CancelledError:
                    cancelled.append(True)
                    raise
                return HealthCheckResult.healthy()

        async def scenario():
            task = asyncio.create_task(
                _executor(Blocking()).check_all(timeout_seconds=30)
            )
            await asyncio.sleep(0.05)
            task.cancel()
            try:
                await task
            finally:
                await asyncio.sleep(0.01)

        with pytest.raises(asyncio.CancelledError):
            asyncio.run(scenario())

        assert cancelled == [True]

    def test_cancelled_run_waits_for_check_cleanup(self):
        cleaned = []

        class SlowCleanup(HealthCheckPlugin):
            name = "slow_cleanup"
            timeout_seconds = 30

            def __init__(self, started):
                self.started = started

            async def check(self):
                self.started.set()
                try:
                    await asyncio.sleep(30)
                finally:
                    # Cleanup spans extra loop iterations
                    await asyncio.sleep(0)
                    await asyncio.sleep(0)
                    cleaned.append(True)
                return HealthCheckResult.healthy()

        async def scenario():
            started = asyncio.Event()
            task = asyncio.create_task(
                _executor(SlowCleanup(started)).check_all(timeout_seconds=30)
            )
            await started.wait()
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task
            return list(cleaned)

        assert asyncio.run(scenario()) == [True]
