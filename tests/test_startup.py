# ============================================================================
# STARTUP ENTRY POINT TESTS
# ============================================================================
# EPOCH: 1 - STARTUP READINESS
# STATUS: Tests - Registration + validation end to end
# PURPOSE: Verify the bootstrap-facing API and the example application
# CREATED: 19 OCT 2026
# ============================================================================
"""
Startup Entry Point Tests

Exercises registry → executor → runner together with real check
plugins and a zero delay, plus the FastAPI lifespan in main.py.

Run with:
    pytest tests/test_startup.py -v
"""

import asyncio
import pytest
from fastapi.testclient import TestClient

from health import (
    HealthCheckRegistry,
    HealthCheckResult,
    HealthCheckRunnerOptions,
    HealthProberError,
    HealthStatus,
    RecordingNoticeSink,
    StartupHealthCheckError,
    add_startup_health_checks,
    validate_startup,
    validate_startup_health_checks,
)


# ============================================================================
# HELPERS
# ============================================================================

def _options(**overrides):
    values = {"retry_count": 3, "delay_seconds": 0, "timeout_seconds": 5, "max_parallelism": 4}
    values.update(overrides)
    return HealthCheckRunnerOptions(**values)


class Flaky:
    """Unhealthy for the first `failures` calls, healthy afterwards."""

    def __init__(self, failures):
        self.failures = failures
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return self.calls > self.failures


# ============================================================================
# REGISTRATION
# ============================================================================

class TestAddStartupHealthChecks:

    def test_configure_callback_receives_builder(self):
        registry = HealthCheckRegistry()

        returned = add_startup_health_checks(
            lambda hc: hc.add_callable("a", lambda: True).add_callable("b", lambda: True),
            registry=registry,
        )

        assert returned is registry
        assert registry.names() == ["a", "b"]


# ============================================================================
# VALIDATION
# ============================================================================

class TestValidateStartupHealthChecks:

    def test_ready_after_retries(self):
        flaky = Flaky(failures=2)
        registry = add_startup_health_checks(
            lambda hc: hc.add_callable("Redis:Cache", flaky),
            registry=HealthCheckRegistry(),
        )
        sink = RecordingNoticeSink()

        result = asyncio.run(
            validate_startup_health_checks(_options(), registry=registry, sink=sink)
        )

        assert result.status == HealthStatus.HEALTHY
        assert flaky.calls == 3
        assert len([m for m, _ in sink.infos if "Retrying" in m]) == 2

    def test_never_ready_reports_every_check(self):
        async def degraded():
            return HealthCheckResult.degraded("eviction storm")

        def broken():
            raise ConnectionError("login failed for user 'app'")

        registry = add_startup_health_checks(
            lambda hc: hc.add_callable("SQL:MainDb", broken).add_callable("Redis:Cache", degraded),
            registry=HealthCheckRegistry(),
        )
        sink = RecordingNoticeSink()

        with pytest.raises(StartupHealthCheckError) as exc_info:
            asyncio.run(
                validate_startup_health_checks(_options(), registry=registry, sink=sink)
            )

        assert exc_info.value.attempts == 3
        assert len(sink.diagnostics) == 2
        by_name = {d.name: d for d in sink.diagnostics}
        assert by_name["SQL:MainDb"].status == "unhealthy"
        assert by_name["SQL:MainDb"].failure_message == "login failed for user 'app'"
        assert "ConnectionError" in by_name["SQL:MainDb"].failure_trace
        assert by_name["Redis:Cache"].status == "degraded"
        assert by_name["Redis:Cache"].description == "eviction storm"

    def test_sync_wrapper(self):
        registry = add_startup_health_checks(
            lambda hc: hc.add_callable("ok", lambda: True),
            registry=HealthCheckRegistry(),
        )
        result = validate_startup(_options(), registry=registry, sink=RecordingNoticeSink())
        assert result.is_healthy

    def test_sync_wrapper_raises_fatal(self):
        registry = add_startup_health_checks(
            lambda hc: hc.add_callable("down", lambda: False),
            registry=HealthCheckRegistry(),
        )
        with pytest.raises(StartupHealthCheckError):
            validate_startup(
                _options(retry_count=1), registry=registry, sink=RecordingNoticeSink()
            )

    def test_options_from_env_when_omitted(self, monkeypatch):
        from core.config import reset_defaults

        monkeypatch.setenv("STARTUP_HEALTH_RETRY_COUNT", "2")
        monkeypatch.setenv("STARTUP_HEALTH_DELAY_SECONDS", "0")
        reset_defaults()
        flaky = Flaky(failures=5)
        registry = add_startup_health_checks(
            lambda hc: hc.add_callable("svc", flaky),
            registry=HealthCheckRegistry(),
        )

        try:
            with pytest.raises(StartupHealthCheckError):
                asyncio.run(
                    validate_startup_health_checks(
                        registry=registry, sink=RecordingNoticeSink()
                    )
                )
        finally:
            reset_defaults()

        assert flaky.calls == 2


class TestProberFaultEndToEnd:

    def test_registry_fault_surfaces(self):
        class CorruptRegistry(HealthCheckRegistry):
            def get_all(self):
                raise RuntimeError("registry corrupted")

        registry = CorruptRegistry()

        with pytest.raises(HealthProberError) as exc_info:
            asyncio.run(
                validate_startup_health_checks(
                    _options(), registry=registry, sink=RecordingNoticeSink()
                )
            )

        assert exc_info.value.attempt == 1
        assert isinstance(exc_info.value.__cause__, RuntimeError)


# ============================================================================
# EXAMPLE APPLICATION
# ============================================================================

class TestExampleApp:

    def test_app_serves_when_dependencies_healthy(self):
        import main

        registry = add_startup_health_checks(
            lambda hc: hc.add_callable("ok", lambda: True),
            registry=HealthCheckRegistry(),
        )
        app = main.create_app(registry=registry)

        with TestClient(app) as client:
            response = client.get("/")
            assert response.status_code == 200
            assert app.state.startup_health.is_healthy

    def test_app_refuses_to_start(self, monkeypatch):
        import main
        from core.config import reset_defaults

        monkeypatch.setenv("STARTUP_HEALTH_RETRY_COUNT", "1")
        reset_defaults()
        registry = add_startup_health_checks(
            lambda hc: hc.add_callable("down", lambda: False),
            registry=HealthCheckRegistry(),
        )
        app = main.create_app(registry=registry)

        async def start():
            async with app.router.lifespan_context(app):
                pass

        try:
            with pytest.raises(StartupHealthCheckError):
                asyncio.run(start())
        finally:
            reset_defaults()

    def test_configure_checks_reads_environment(self, monkeypatch):
        import main

        monkeypatch.setenv("MAIN_DB_URL", "postgresql://db/main")
        monkeypatch.delenv("REPORTING_DB_URL", raising=False)
        monkeypatch.setenv("REDIS_URL", "redis://cache:6379/0")
        monkeypatch.setenv("EXTERNAL_API_URLS", "https://a.example/ping, https://b.example/ping")

        registry = add_startup_health_checks(main.configure_checks, registry=HealthCheckRegistry())

        assert registry.names() == ["SQL:MainDb", "Redis:Cache", "ExternalAPI"]
        assert registry.get("ExternalAPI").urls == [
            "https://a.example/ping", "https://b.example/ping",
        ]
        assert registry.get("Redis:Cache").url == "redis://cache:6379/0"
