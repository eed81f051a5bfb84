# ============================================================================
# HEALTH CHECK REGISTRY
# ============================================================================
# EPOCH: 1 - STARTUP READINESS
# STATUS: Infrastructure - Health check plugin registration
# PURPOSE: Register the dependency checks probed before startup
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Registry

Manages registration of health check plugins.

Usage:
    # Builder registration (bootstrap code)
    registry = HealthCheckRegistry()
    HealthChecksBuilder(registry) \\
        .add_postgres(dsn, name="SQL:MainDb") \\
        .add_url_group(["https://example.com/api/ping"], name="ExternalAPI")

    # Decorator registration (global registry)
    @register_check(name="cache")
    class CacheCheck(HealthCheckPlugin):
        ...
"""

import logging
from typing import Awaitable, Callable, Dict, Iterable, List, Optional, Type, Union

from health.core import HealthCheckPlugin, HealthCheckResult

logger = logging.getLogger(__name__)


class HealthCheckRegistry:
    """
    Registry for health check plugins.

    Check names are unique within a registry; they key the
    per-check entries of every aggregated result.
    """

    def __init__(self):
        self._checks: Dict[str, HealthCheckPlugin] = {}

    def register(self, check: HealthCheckPlugin) -> None:
        """
        Register a health check plugin instance.

        Args:
            check: Plugin instance to register

        Raises:
            ValueError: If check with same name already registered
        """
        if not check.name:
            raise ValueError("Health check name must not be empty")
        if check.name in self._checks:
            raise ValueError(f"Duplicate health check name: {check.name}")

        self._checks[check.name] = check
        logger.debug(
            f"Registered health check: {check.name} "
            f"(timeout={check.timeout_seconds}s)"
        )

    def register_class(
        self,
        check_class: Type[HealthCheckPlugin],
        **kwargs
    ) -> HealthCheckPlugin:
        """
        Instantiate and register a health check class.

        Args:
            check_class: Plugin class to instantiate
            **kwargs: Arguments passed to constructor

        Returns:
            The instantiated plugin
        """
        instance = check_class(**kwargs)
        self.register(instance)
        return instance

    def unregister(self, name: str) -> bool:
        """
        Remove a health check by name.

        Returns:
            True if check was removed
        """
        if name in self._checks:
            del self._checks[name]
            return True
        return False

    def get(self, name: str) -> Optional[HealthCheckPlugin]:
        """Get health check by name."""
        return self._checks.get(name)

    def get_all(self) -> List[HealthCheckPlugin]:
        """Get all registered checks in registration order."""
        return list(self._checks.values())

    def names(self) -> List[str]:
        return list(self._checks)

    def clear(self) -> None:
        """Remove all registered checks."""
        self._checks.clear()

    def __len__(self) -> int:
        return len(self._checks)

    def __contains__(self, name: str) -> bool:
        return name in self._checks


# ============================================================================
# BUILDER
# ============================================================================

CheckFunction = Callable[[], Union[HealthCheckResult, bool, None, Awaitable]]


class HealthChecksBuilder:
    """
    Fluent registration surface handed to the bootstrap callback.

    Every add_* method registers one check and returns the builder.
    """

    def __init__(self, registry: HealthCheckRegistry):
        self.registry = registry

    def add_check(self, check: HealthCheckPlugin) -> "HealthChecksBuilder":
        self.registry.register(check)
        return self

    def add_callable(
        self,
        name: str,
        fn: CheckFunction,
        timeout_seconds: float = 10.0,
    ) -> "HealthChecksBuilder":
        """Register a plain function (sync or async) as a check."""
        from health.checks.callable import CallableCheck

        return self.add_check(CallableCheck(name, fn, timeout_seconds=timeout_seconds))

    def add_postgres(
        self,
        conninfo: str,
        name: str = "postgres",
        query: str = "SELECT 1",
        timeout_seconds: float = 5.0,
    ) -> "HealthChecksBuilder":
        """Register a PostgreSQL connectivity check."""
        from health.checks.database import PostgresCheck

        return self.add_check(
            PostgresCheck(conninfo, name=name, query=query, timeout_seconds=timeout_seconds)
        )

    def add_url_group(
        self,
        urls: Iterable[str],
        name: str = "url_group",
        timeout_seconds: float = 10.0,
    ) -> "HealthChecksBuilder":
        """Register an HTTP check that requires every URL to answer 2xx."""
        from health.checks.http import UrlGroupCheck

        return self.add_check(
            UrlGroupCheck(urls, name=name, timeout_seconds=timeout_seconds)
        )

    def add_redis(
        self,
        url: str,
        name: str = "redis",
        timeout_seconds: float = 5.0,
    ) -> "HealthChecksBuilder":
        """Register a Redis PING check."""
        from health.checks.cache import RedisCheck

        return self.add_check(RedisCheck(url, name=name, timeout_seconds=timeout_seconds))


# ============================================================================
# GLOBAL REGISTRY & DECORATOR
# ============================================================================

_registry: Optional[HealthCheckRegistry] = None


def get_registry() -> HealthCheckRegistry:
    """Get the global health check registry."""
    global _registry
    if _registry is None:
        _registry = HealthCheckRegistry()
    return _registry


def register_check(
    name: str = None,
    timeout_seconds: float = None,
):
    """
    Decorator to register a health check class in the global registry.

    Args:
        name: Override check name
        timeout_seconds: Override timeout

    Example:
        @register_check(name="SQL:MainDb", timeout_seconds=5.0)
        class PostgresCheck(HealthCheckPlugin):
            async def check(self) -> HealthCheckResult:
                ...
    """
    def decorator(cls: Type[HealthCheckPlugin]) -> Type[HealthCheckPlugin]:
        if name is not None:
            cls.name = name

        if timeout_seconds is not None:
            cls.timeout_seconds = timeout_seconds

        get_registry().register_class(cls)

        return cls

    return decorator


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "HealthCheckRegistry",
    "HealthChecksBuilder",
    "get_registry",
    "register_check",
]
