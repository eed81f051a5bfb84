# ============================================================================
# EXAMPLE APPLICATION - STARTUP GATE
# ============================================================================
# EPOCH: 1 - STARTUP READINESS
# STATUS: Example - FastAPI application gated on dependency health
# PURPOSE: Show where startup validation sits in an application lifespan
# CREATED: 19 OCT 2026
# ============================================================================
"""
Example Application

FastAPI application that refuses to start serving until its
dependencies are healthy:
1. Registers startup checks from environment configuration
2. Runs the retry loop inside the lifespan, before the first request
3. Lets StartupAbortedError propagate so the server exits

Environment:
    MAIN_DB_URL          PostgreSQL DSN for "SQL:MainDb" (optional)
    REPORTING_DB_URL     PostgreSQL DSN for "SQL:ReportingDb" (optional)
    REDIS_URL            Redis URL for "Redis:Cache" (optional)
    EXTERNAL_API_URLS    Comma-separated URLs for "ExternalAPI" (optional)
    STARTUP_HEALTH_*     Retry options (see core.config.defaults)
    LOG_LEVEL, LOG_FORMAT

Usage:
    uvicorn main:app --host 0.0.0.0 --port 8000
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI

from __version__ import __version__, BUILD_DATE, EPOCH
from core.config import get_defaults
from core.logging import configure_logging, get_logger, ComponentType
from health import (
    HealthChecksBuilder,
    HealthCheckRegistry,
    HealthCheckRunnerOptions,
    add_startup_health_checks,
    validate_startup_health_checks,
)

_log_defaults = get_defaults().logging
configure_logging(level=_log_defaults.level, json_output=_log_defaults.json_output)
logger = get_logger(__name__, ComponentType.BOOTSTRAP)


def configure_checks(hc: HealthChecksBuilder) -> None:
    """Register checks for every dependency configured in the environment."""
    if dsn := os.environ.get("MAIN_DB_URL"):
        hc.add_postgres(dsn, name="SQL:MainDb")
    if dsn := os.environ.get("REPORTING_DB_URL"):
        hc.add_postgres(dsn, name="SQL:ReportingDb")
    if url := os.environ.get("REDIS_URL"):
        hc.add_redis(url, name="Redis:Cache")

    urls = [u.strip() for u in os.environ.get("EXTERNAL_API_URLS", "").split(",") if u.strip()]
    if urls:
        hc.add_url_group(urls, name="ExternalAPI")


def create_app(registry: HealthCheckRegistry = None) -> FastAPI:
    """Build the application with its own check registry."""
    registry = registry if registry is not None else add_startup_health_checks(
        configure_checks, registry=HealthCheckRegistry()
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting v{__version__} (Epoch {EPOCH}, Build {BUILD_DATE})")

        app.state.startup_health = await validate_startup_health_checks(
            HealthCheckRunnerOptions.from_env(),
            registry=registry,
        )

        yield

        logger.info("Shutting down")

    application = FastAPI(
        title="Startup Health Checks Example",
        version=__version__,
        lifespan=lifespan,
    )

    @application.get("/")
    async def root():
        """Root endpoint."""
        return {
            "service": "startup-healthchecks-example",
            "version": __version__,
            "status": "running",
        }

    return application


app = create_app()


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=os.environ.get("RELOAD", "false").lower() == "true",
    )
