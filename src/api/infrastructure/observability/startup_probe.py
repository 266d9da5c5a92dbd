"""Domain probe for application startup and lifecycle events.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events during application initialization and shutdown.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class StartupProbe(Protocol):
    """Domain probe for application startup operations."""

    def application_starting(self, app_name: str, version: str) -> None:
        """Record that the application lifespan began."""
        ...

    def signing_keys_preloaded(self, key_count: int) -> None:
        """Record that the JWKS was loaded before serving requests."""
        ...

    def signing_keys_preload_failed(self, error: str) -> None:
        """Record that loading the JWKS at startup failed.

        The verifier retries lazily on the first token it sees.
        """
        ...

    def application_stopped(self) -> None:
        """Record that shutdown cleanup finished."""
        ...

    def with_context(self, context: ObservationContext) -> StartupProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultStartupProbe:
    """Default implementation of StartupProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultStartupProbe:
        """Create a new probe with observation context bound."""
        return DefaultStartupProbe(logger=self._logger, context=context)

    def application_starting(self, app_name: str, version: str) -> None:
        """Record that the application lifespan began."""
        self._logger.info(
            "application_starting",
            app_name=app_name,
            version=version,
            **self._get_context_kwargs(),
        )

    def signing_keys_preloaded(self, key_count: int) -> None:
        """Record that the JWKS was loaded before serving requests."""
        self._logger.info(
            "signing_keys_preloaded",
            key_count=key_count,
            **self._get_context_kwargs(),
        )

    def signing_keys_preload_failed(self, error: str) -> None:
        """Record that loading the JWKS at startup failed."""
        self._logger.warning(
            "signing_keys_preload_failed",
            error=error,
            **self._get_context_kwargs(),
        )

    def application_stopped(self) -> None:
        """Record that shutdown cleanup finished."""
        self._logger.info(
            "application_stopped",
            **self._get_context_kwargs(),
        )
