# ============================================================================
# HEALTH CHECK CORE TYPES
# ============================================================================
# EPOCH: 1 - STARTUP READINESS
# STATUS: Infrastructure - Base classes for health checks
# PURPOSE: Health check plugin interface and result types
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Core Types

Defines the plugin interface and result types for health checks.

Status Hierarchy (worst wins):
- healthy: Dependency ready
- degraded: Reachable with warnings
- unhealthy: Not ready

Only an aggregate status of exactly "healthy" lets startup proceed.
"""

import traceback
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Iterable, Optional
from dataclasses import dataclass, field
from datetime import datetime, timezone


class HealthStatus(str, Enum):
    """Health check status values."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"

    @property
    def severity(self) -> int:
        """Ordering used for 'worst wins' aggregation."""
        return {
            HealthStatus.HEALTHY: 0,
            HealthStatus.DEGRADED: 1,
            HealthStatus.UNHEALTHY: 2,
        }[self]

    @classmethod
    def aggregate(cls, statuses: Iterable["HealthStatus"]) -> "HealthStatus":
        """Aggregate multiple statuses (worst wins)."""
        statuses = list(statuses)
        if not statuses:
            return cls.HEALTHY
        return max(statuses, key=lambda s: s.severity)


@dataclass(frozen=True)
class FailureCause:
    """Why a check failed: exception message and formatted trace."""
    message: str
    trace: str = ""
    exception_type: Optional[str] = None

    @classmethod
    def from_exception(cls, e: BaseException) -> "FailureCause":
        return cls(
            message=str(e),
            trace="".join(
                traceback.format_exception(type(e), e, e.__traceback__)
            ),
            exception_type=type(e).__name__,
        )


@dataclass
class HealthCheckResult:
    """Result from a single health check."""
    status: HealthStatus
    description: str = ""
    failure: Optional[FailureCause] = None
    details: Dict[str, Any] = field(default_factory=dict)
    duration_ms: float = 0.0

    @classmethod
    def healthy(cls, description: str = "", **details) -> "HealthCheckResult":
        """Create healthy result."""
        return cls(status=HealthStatus.HEALTHY, description=description, details=details)

    @classmethod
    def degraded(cls, description: str, **details) -> "HealthCheckResult":
        """Create degraded result."""
        return cls(status=HealthStatus.DEGRADED, description=description, details=details)

    @classmethod
    def unhealthy(
        cls,
        description: str,
        failure: Optional[FailureCause] = None,
        **details,
    ) -> "HealthCheckResult":
        """Create unhealthy result."""
        return cls(
            status=HealthStatus.UNHEALTHY,
            description=description,
            failure=failure,
            details=details,
        )

    @classmethod
    def from_exception(
        cls,
        e: BaseException,
        description: Optional[str] = None,
    ) -> "HealthCheckResult":
        """Create unhealthy result from exception."""
        return cls(
            status=HealthStatus.UNHEALTHY,
            description=description if description is not None else str(e),
            failure=FailureCause.from_exception(e),
        )

    @property
    def failure_message(self) -> str:
        return self.failure.message if self.failure else ""

    @property
    def failure_trace(self) -> str:
        return self.failure.trace if self.failure else ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        result = {
            "status": self.status.value,
            "duration_ms": round(self.duration_ms, 2),
        }
        if self.description:
            result["description"] = self.description
        if self.failure:
            result["failure"] = {
                "message": self.failure.message,
                "exception_type": self.failure.exception_type,
            }
        if self.details:
            result["details"] = self.details
        return result


@dataclass
class AggregatedHealthResult:
    """Aggregated result from one run of every registered check."""
    status: HealthStatus
    entries: Dict[str, HealthCheckResult]
    total_duration_ms: float = 0.0
    checked_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_healthy(self) -> bool:
        return self.status == HealthStatus.HEALTHY

    def failing_entries(self) -> Dict[str, HealthCheckResult]:
        """Entries whose status is not healthy."""
        return {
            name: result
            for name, result in self.entries.items()
            if result.status != HealthStatus.HEALTHY
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "status": self.status.value,
            "entries": {
                name: result.to_dict()
                for name, result in self.entries.items()
            },
            "total_duration_ms": round(self.total_duration_ms, 2),
            "checked_at": self.checked_at.isoformat(),
        }


class HealthCheckPlugin(ABC):
    """
    Base class for health check plugins.

    Subclass and implement check() to create custom health checks.
    Register instances through HealthChecksBuilder or @register_check.

    Attributes:
        name: Unique identifier for the check
        timeout_seconds: Max execution time before the check is unhealthy

    Example:
        class PostgresCheck(HealthCheckPlugin):
            name = "SQL:MainDb"
            timeout_seconds = 5.0

            async def check(self) -> HealthCheckResult:
                await db.execute("SELECT 1")
                return HealthCheckResult.healthy()

    A check that raises is reported as unhealthy by the executor, so
    implementations do not need to catch their own errors.
    """

    name: str = "unnamed"
    timeout_seconds: float = 10.0

    @abstractmethod
    async def check(self) -> HealthCheckResult:
        """
        Execute health check.

        Returns:
            HealthCheckResult with status and optional details
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
