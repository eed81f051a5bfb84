# ============================================================================
# STARTUP ENTRY POINTS
# ============================================================================
# EPOCH: 1 - STARTUP READINESS
# STATUS: Core - Bootstrap-facing API
# PURPOSE: Register startup checks and validate them before serving traffic
# CREATED: 19 OCT 2026
# ============================================================================
"""
Startup Entry Points

Bootstrap code uses two calls:

    registry = add_startup_health_checks(lambda hc: (
        hc.add_postgres(os.environ["MAIN_DB_DSN"], name="SQL:MainDb"),
        hc.add_url_group(["https://example.com/api/ping"], name="ExternalAPI"),
    ))

    await validate_startup_health_checks(
        HealthCheckRunnerOptions(retry_count=3, delay_seconds=5),
        registry=registry,
    )

validate_startup_health_checks() returns on readiness and raises a
StartupAbortedError subclass otherwise. Call it once, before the
application starts accepting traffic. validate_startup() is the same
call for synchronous bootstraps.
"""

import asyncio
from typing import Callable, Optional

from core.logging import ComponentType, get_logger
from health.core import AggregatedHealthResult
from health.executor import HealthCheckExecutor
from health.notices import NoticeSink
from health.options import HealthCheckRunnerOptions
from health.registry import HealthCheckRegistry, HealthChecksBuilder, get_registry
from health.runner import StartupHealthCheckRunner

logger = get_logger(__name__, ComponentType.BOOTSTRAP)


def add_startup_health_checks(
    configure: Callable[[HealthChecksBuilder], object],
    registry: Optional[HealthCheckRegistry] = None,
) -> HealthCheckRegistry:
    """
    Register startup checks through a configuration callback.

    Args:
        configure: Called once with a HealthChecksBuilder
        registry: Target registry (uses global if None)

    Returns:
        The registry the checks were added to
    """
    registry = registry if registry is not None else get_registry()
    configure(HealthChecksBuilder(registry))
    logger.info(f"Startup health checks registered ({len(registry)} checks)")
    return registry


async def validate_startup_health_checks(
    options: Optional[HealthCheckRunnerOptions] = None,
    *,
    registry: Optional[HealthCheckRegistry] = None,
    sink: Optional[NoticeSink] = None,
    cancel_event: Optional[asyncio.Event] = None,
) -> AggregatedHealthResult:
    """
    Run the startup retry loop once against the registered checks.

    Raises:
        StartupHealthCheckError: Dependencies not ready after all attempts
        HealthProberError: Checks could not be executed at all
        asyncio.CancelledError: Validation was cancelled
    """
    options = options if options is not None else HealthCheckRunnerOptions.from_env()
    executor = HealthCheckExecutor(
        registry=registry,
        timeout_seconds=options.timeout_seconds,
        max_parallelism=options.max_parallelism,
    )
    runner = StartupHealthCheckRunner(executor, sink=sink)
    return await runner.run(options, cancel_event=cancel_event)


def validate_startup(
    options: Optional[HealthCheckRunnerOptions] = None,
    *,
    registry: Optional[HealthCheckRegistry] = None,
    sink: Optional[NoticeSink] = None,
) -> AggregatedHealthResult:
    """Blocking form of validate_startup_health_checks() for sync bootstraps."""
    return asyncio.run(
        validate_startup_health_checks(options, registry=registry, sink=sink)
    )


__all__ = [
    "add_startup_health_checks",
    "validate_startup_health_checks",
    "validate_startup",
]
