# ============================================================================
# CORE MODULE
# ============================================================================
# EPOCH: 1 - STARTUP READINESS
# STATUS: Core module initialization
# PURPOSE: Export logging and configuration utilities
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================

from core.config import HealthCheckDefaults, LoggingDefaults, get_defaults
from core.logging import configure_logging, get_logger, log_context

__all__ = [
    # Config
    "HealthCheckDefaults",
    "LoggingDefaults",
    "get_defaults",
    # Logging
    "configure_logging",
    "get_logger",
    "log_context",
]
