# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# EPOCH: 1 - STARTUP READINESS
# STATUS: Core - Structured logging with context
# PURPOSE: Consistent, queryable logging for startup health checks
# CREATED: 19 OCT 2026
# ============================================================================
"""
Structured Logging

Provides structured logging for the startup health check gate.

Features:
- Component-based loggers
- Contextual fields (attempt, check_name, operation)
- JSON output for log aggregation
- Human-readable output for local development

Usage:
    from core.logging import get_logger, log_context

    logger = get_logger("health.runner")

    with log_context(attempt=2, operation="startup_validation"):
        logger.info("Retrying", extra={"delay_seconds": 5})
"""

import json
import logging
import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple, Union
from enum import Enum


class ComponentType(str, Enum):
    """Component types for logging categorization."""
    RUNNER = "runner"
    EXECUTOR = "executor"
    REGISTRY = "registry"
    CHECK = "check"
    BOOTSTRAP = "bootstrap"


@dataclass
class LogContext:
    """
    Context for structured logging.

    Stored in a ContextVar so concurrent checks keep their own fields.
    """
    attempt: Optional[int] = None
    retry_count: Optional[int] = None
    check_name: Optional[str] = None
    component: Optional[str] = None
    operation: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict, excluding None values."""
        result = {}
        for key, value in asdict(self).items():
            if value is not None and key != "extra":
                result[key] = value
        if self.extra:
            result.update(self.extra)
        return result


_context_stack: ContextVar[Tuple[LogContext, ...]] = ContextVar(
    "health_log_context", default=()
)


def get_current_context() -> LogContext:
    """Get current logging context."""
    stack = _context_stack.get()
    if stack:
        return stack[-1]
    return LogContext()


@contextmanager
def log_context(**kwargs):
    """
    Context manager for adding logging context.

    Args:
        **kwargs: Context fields to add

    Example:
        with log_context(attempt=1, check_name="postgres"):
            logger.info("Running check")
    """
    parent = get_current_context()
    new_context = LogContext(
        attempt=kwargs.get("attempt", parent.attempt),
        retry_count=kwargs.get("retry_count", parent.retry_count),
        check_name=kwargs.get("check_name", parent.check_name),
        component=kwargs.get("component", parent.component),
        operation=kwargs.get("operation", parent.operation),
        extra={**parent.extra, **kwargs.get("extra", {})},
    )

    token = _context_stack.set(_context_stack.get() + (new_context,))
    try:
        yield new_context
    finally:
        _context_stack.reset(token)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs log records as JSON for easy parsing by log aggregators.
    """

    def __init__(
        self,
        include_timestamp: bool = True,
        include_level: bool = True,
        include_logger: bool = True,
        include_source: bool = True,
    ):
        super().__init__()
        self.include_timestamp = include_timestamp
        self.include_level = include_level
        self.include_logger = include_logger
        self.include_source = include_source

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: Dict[str, Any] = {}

        if self.include_timestamp:
            log_data["timestamp"] = _utcnow().isoformat().replace("+00:00", "Z")

        if self.include_level:
            log_data["level"] = record.levelname

        if self.include_logger:
            log_data["logger"] = record.name

        log_data["message"] = record.getMessage()

        # ContextLogger stores fields (context included) under record.extra
        if hasattr(record, "extra") and record.extra:
            log_data["data"] = record.extra

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if self.include_source:
            log_data["source"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        return json.dumps(log_data, default=str)


class HumanFormatter(logging.Formatter):
    """
    Human-readable formatter for development.

    Includes attempt and check fields inline for easy reading.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record for human reading."""
        timestamp = _utcnow().strftime("%Y-%m-%d %H:%M:%S")
        level = record.levelname.ljust(8)

        fields = dict(getattr(record, "extra", None) or {})
        context_parts = []
        if fields.get("attempt") is not None:
            total = fields.pop("retry_count", None)
            attempt = fields.pop("attempt")
            context_parts.append(
                f"attempt={attempt}/{total}" if total else f"attempt={attempt}"
            )
        if fields.get("check_name"):
            context_parts.append(f"check={fields.pop('check_name')}")

        context_str = f" [{', '.join(context_parts)}]" if context_parts else ""

        message = record.getMessage()

        # Multi-line traces print below the record, not inside the field dict
        trace = fields.pop("failure_trace", None)

        extra_str = f" {fields}" if fields else ""

        result = f"{timestamp} {level} {record.name}{context_str}: {message}{extra_str}"

        if trace:
            result += f"\n{trace.rstrip()}"

        if record.exc_info:
            result += f"\n{self.formatException(record.exc_info)}"

        return result


class ContextLogger(logging.LoggerAdapter):
    """
    Logger adapter that includes context in log records.

    Merges the active log_context() fields with per-call extra fields
    and stores them as record.extra for the formatters.
    """

    def process(self, msg, kwargs):
        """Process log record to include context."""
        context = get_current_context()

        extra = dict(context.to_dict())
        if self.extra and self.extra.get("component"):
            extra.setdefault("component", self.extra["component"].value
                             if isinstance(self.extra["component"], Enum)
                             else self.extra["component"])
        extra.update(kwargs.get("extra") or {})

        kwargs["extra"] = {"extra": extra}

        return msg, kwargs


def get_logger(
    name: str,
    component: Optional[ComponentType] = None,
) -> ContextLogger:
    """
    Get a context-aware logger.

    Args:
        name: Logger name (e.g., "health.runner")
        component: Optional component type for categorization

    Returns:
        ContextLogger instance
    """
    base_logger = logging.getLogger(name)
    return ContextLogger(base_logger, {"component": component})


def configure_logging(
    level: Union[str, int] = "INFO",
    json_output: bool = False,
    include_source: bool = True,
) -> None:
    """
    Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_output: Use JSON format (for production)
        include_source: Include source file/line info in JSON output
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    if json_output or os.getenv("LOG_FORMAT", "").lower() == "json":
        formatter = StructuredFormatter(include_source=include_source)
    else:
        formatter = HumanFormatter()

    root = logging.getLogger()
    root.setLevel(level)

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    root.addHandler(handler)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ComponentType",
    "LogContext",
    "StructuredFormatter",
    "HumanFormatter",
    "ContextLogger",
    "get_logger",
    "configure_logging",
    "log_context",
    "get_current_context",
]
