# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# EPOCH: 1 - STARTUP READINESS
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for startup health checks and logging
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides sensible defaults for the startup health check gate.
These can be overridden via environment variables or explicit options.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class HealthCheckDefaults:
    """
    Defaults for the startup retry runner.

    retry_count is the total number of attempts, not the number of retries.
    timeout_seconds and max_parallelism are hints passed to the executor.
    """
    retry_count: int = 3
    delay_seconds: float = 5.0
    timeout_seconds: float = 10.0
    max_parallelism: int = 4

    @classmethod
    def from_env(cls) -> "HealthCheckDefaults":
        """Create from environment variables."""
        return cls(
            retry_count=int(os.getenv("STARTUP_HEALTH_RETRY_COUNT", 3)),
            delay_seconds=float(os.getenv("STARTUP_HEALTH_DELAY_SECONDS", 5.0)),
            timeout_seconds=float(os.getenv("STARTUP_HEALTH_TIMEOUT_SECONDS", 10.0)),
            max_parallelism=int(os.getenv("STARTUP_HEALTH_MAX_PARALLELISM", 4)),
        )


@dataclass(frozen=True)
class LoggingDefaults:
    """Defaults for log level and output format."""
    level: str = "INFO"
    json_output: bool = False

    @classmethod
    def from_env(cls) -> "LoggingDefaults":
        """Create from environment variables."""
        return cls(
            level=os.getenv("LOG_LEVEL", "INFO"),
            json_output=os.getenv("LOG_FORMAT", "").lower() == "json",
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    health: HealthCheckDefaults = field(default_factory=HealthCheckDefaults)
    logging: LoggingDefaults = field(default_factory=LoggingDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            health=HealthCheckDefaults.from_env(),
            logging=LoggingDefaults.from_env(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "HealthCheckDefaults",
    "LoggingDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
