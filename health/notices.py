# ============================================================================
# STARTUP NOTICES
# ============================================================================
# EPOCH: 1 - STARTUP READINESS
# STATUS: Infrastructure - Runner notice sinks
# PURPOSE: Where the runner reports retries, success, and failure diagnostics
# CREATED: 19 OCT 2026
# ============================================================================
"""
Startup Notices

The runner never logs directly. It reports through a NoticeSink:
- info(message, **fields): retry and success notices
- error(message, **fields): the exhausted-budget notice
- diagnostic(CheckDiagnostic): one record per check after the final attempt

LoggingNoticeSink writes through core.logging and is the default.
RecordingNoticeSink keeps everything in memory for tests.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Tuple, runtime_checkable

from core.logging import ComponentType, ContextLogger, get_logger
from health.core import HealthCheckResult


@dataclass(frozen=True)
class CheckDiagnostic:
    """Per-check breakdown emitted when startup is aborted."""
    name: str
    status: str
    description: str
    failure_message: str
    failure_trace: str

    @classmethod
    def from_result(cls, name: str, result: HealthCheckResult) -> "CheckDiagnostic":
        return cls(
            name=name,
            status=result.status.value,
            description=result.description or "",
            failure_message=result.failure_message,
            failure_trace=result.failure_trace,
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "name": self.name,
            "status": self.status,
            "description": self.description,
            "failure_message": self.failure_message,
            "failure_trace": self.failure_trace,
        }


@runtime_checkable
class NoticeSink(Protocol):
    """Receives leveled, structured notices from the runner."""

    def info(self, message: str, **fields: Any) -> None: ...

    def error(self, message: str, **fields: Any) -> None: ...

    def diagnostic(self, record: CheckDiagnostic) -> None: ...


class LoggingNoticeSink:
    """NoticeSink backed by a context-aware logger."""

    def __init__(self, logger: Optional[ContextLogger] = None):
        self.logger = logger or get_logger("health.startup", ComponentType.RUNNER)

    def info(self, message: str, **fields: Any) -> None:
        self.logger.info(message, extra=fields)

    def error(self, message: str, **fields: Any) -> None:
        self.logger.error(message, extra=fields)

    def diagnostic(self, record: CheckDiagnostic) -> None:
        self.logger.error(
            f"Service: {record.name}, Status: {record.status}, "
            f"Description: {record.description}, "
            f"Exception: {record.failure_message}",
            extra=record.to_dict(),
        )


@dataclass
class RecordingNoticeSink:
    """NoticeSink that keeps every notice in memory."""
    infos: List[Tuple[str, Dict[str, Any]]] = field(default_factory=list)
    errors: List[Tuple[str, Dict[str, Any]]] = field(default_factory=list)
    diagnostics: List[CheckDiagnostic] = field(default_factory=list)

    def info(self, message: str, **fields: Any) -> None:
        self.infos.append((message, fields))

    def error(self, message: str, **fields: Any) -> None:
        self.errors.append((message, fields))

    def diagnostic(self, record: CheckDiagnostic) -> None:
        self.diagnostics.append(record)


__all__ = [
    "CheckDiagnostic",
    "NoticeSink",
    "LoggingNoticeSink",
    "RecordingNoticeSink",
]
