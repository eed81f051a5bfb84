# ============================================================================
# STARTUP RUNNER OPTIONS
# ============================================================================
# EPOCH: 1 - STARTUP READINESS
# STATUS: Contracts - Retry runner configuration
# PURPOSE: Validated, immutable options for one startup validation run
# CREATED: 19 OCT 2026
# ============================================================================
"""
Startup Runner Options

retry_count is the total attempt budget (1 means a single attempt).
delay_seconds is constant between attempts; there is no backoff growth.
timeout_seconds and max_parallelism are passed through to the executor.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field

from core.config import HealthCheckDefaults, get_defaults

_DEFAULTS = HealthCheckDefaults()


class HealthCheckRunnerOptions(BaseModel):
    """Options for StartupHealthCheckRunner.run()."""

    retry_count: int = Field(
        default=_DEFAULTS.retry_count, ge=1,
        description="Total attempts, including the first",
    )
    delay_seconds: float = Field(
        default=_DEFAULTS.delay_seconds, ge=0,
        description="Wait between failed attempts",
    )
    timeout_seconds: float = Field(
        default=_DEFAULTS.timeout_seconds, gt=0,
        description="Overall bound for one run of all checks",
    )
    max_parallelism: int = Field(
        default=_DEFAULTS.max_parallelism, ge=1,
        description="Max checks executing concurrently",
    )

    model_config = {"frozen": True, "extra": "forbid"}

    @classmethod
    def from_defaults(cls, defaults: HealthCheckDefaults) -> "HealthCheckRunnerOptions":
        return cls(
            retry_count=defaults.retry_count,
            delay_seconds=defaults.delay_seconds,
            timeout_seconds=defaults.timeout_seconds,
            max_parallelism=defaults.max_parallelism,
        )

    @classmethod
    def from_env(cls) -> "HealthCheckRunnerOptions":
        """Create from STARTUP_HEALTH_* environment variables."""
        return cls.from_defaults(get_defaults().health)


def merge_options(
    base: Optional[HealthCheckRunnerOptions] = None,
    **overrides: Any,
) -> HealthCheckRunnerOptions:
    """
    Return new options with caller overrides applied on top of base.

    None values are ignored so optional arguments can be forwarded as-is.
    Overrides are validated the same way as the constructor.
    """
    base = base if base is not None else HealthCheckRunnerOptions()
    values = base.model_dump()
    values.update({k: v for k, v in overrides.items() if v is not None})
    return HealthCheckRunnerOptions(**values)


__all__ = [
    "HealthCheckRunnerOptions",
    "merge_options",
]
