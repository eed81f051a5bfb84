# ============================================================================
# HEALTH CHECK MODULE
# ============================================================================
# EPOCH: 1 - STARTUP READINESS
# STATUS: Infrastructure - Startup dependency gate
# PURPOSE: Block application startup until dependencies are healthy
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Module

Startup readiness gate:
- Register dependency checks (databases, caches, remote APIs)
- Probe them all, retrying with a fixed delay up to a budget
- Abort startup with a per-check breakdown if they never become healthy

Architecture:
- HealthCheckPlugin: Base class for health checks
- HealthCheckRegistry / HealthChecksBuilder: Registration
- HealthCheckExecutor: Parallel execution with timeouts (the prober)
- StartupHealthCheckRunner: Retry loop and failure reporting

Usage:
    from health import (
        HealthCheckRunnerOptions,
        add_startup_health_checks,
        validate_startup_health_checks,
    )

    registry = add_startup_health_checks(
        lambda hc: hc.add_postgres(dsn, name="SQL:MainDb")
    )
    await validate_startup_health_checks(
        HealthCheckRunnerOptions(retry_count=3, delay_seconds=5),
        registry=registry,
    )
"""

from health.core import (
    HealthStatus,
    FailureCause,
    HealthCheckResult,
    AggregatedHealthResult,
    HealthCheckPlugin,
)
from health.registry import (
    HealthCheckRegistry,
    HealthChecksBuilder,
    register_check,
    get_registry,
)
from health.executor import HealthCheckExecutor
from health.options import HealthCheckRunnerOptions, merge_options
from health.notices import (
    CheckDiagnostic,
    NoticeSink,
    LoggingNoticeSink,
    RecordingNoticeSink,
)
from health.runner import (
    StartupAbortedError,
    StartupHealthCheckError,
    HealthProberError,
    StartupHealthCheckRunner,
)
from health.startup import (
    add_startup_health_checks,
    validate_startup_health_checks,
    validate_startup,
)

__all__ = [
    # Core types
    "HealthStatus",
    "FailureCause",
    "HealthCheckResult",
    "AggregatedHealthResult",
    "HealthCheckPlugin",
    # Registry
    "HealthCheckRegistry",
    "HealthChecksBuilder",
    "register_check",
    "get_registry",
    # Executor
    "HealthCheckExecutor",
    # Runner
    "HealthCheckRunnerOptions",
    "merge_options",
    "CheckDiagnostic",
    "NoticeSink",
    "LoggingNoticeSink",
    "RecordingNoticeSink",
    "StartupAbortedError",
    "StartupHealthCheckError",
    "HealthProberError",
    "StartupHealthCheckRunner",
    # Entry points
    "add_startup_health_checks",
    "validate_startup_health_checks",
    "validate_startup",
]
