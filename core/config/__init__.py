# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# EPOCH: 1 - STARTUP READINESS
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for the startup gate.
"""

from core.config.defaults import (
    HealthCheckDefaults,
    LoggingDefaults,
    Defaults,
    get_defaults,
    reset_defaults,
)

__all__ = [
    "HealthCheckDefaults",
    "LoggingDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
