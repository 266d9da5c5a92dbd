"""Protocol and default implementation for login flow observability.

Captures the domain events of the authorization code flow: a login started,
a callback was accepted or refused, the code exchange failed upstream.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class LoginProbe(Protocol):
    """Domain probe for the login flow."""

    def login_started(self, has_return_path: bool) -> None:
        """Record that a login attempt was started."""
        ...

    def pending_state_missing(self) -> None:
        """Record that a callback found no pending login state."""
        ...

    def login_rejected(self, reason: str) -> None:
        """Record that a callback was refused."""
        ...

    def code_exchange_failed(self, error: str) -> None:
        """Record that the identity provider's token endpoint failed."""
        ...

    def login_succeeded(self, identity_id: str) -> None:
        """Record that a user logged in."""
        ...

    def with_context(self, context: ObservationContext) -> LoginProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultLoginProbe:
    """Default implementation of LoginProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultLoginProbe:
        """Create a new probe with observation context bound."""
        return DefaultLoginProbe(logger=self._logger, context=context)

    def login_started(self, has_return_path: bool) -> None:
        """Record that a login attempt was started."""
        self._logger.info(
            "login_started",
            has_return_path=has_return_path,
            **self._get_context_kwargs(),
        )

    def pending_state_missing(self) -> None:
        """Record that a callback found no pending login state."""
        self._logger.warning(
            "login_pending_state_missing",
            **self._get_context_kwargs(),
        )

    def login_rejected(self, reason: str) -> None:
        """Record that a callback was refused."""
        self._logger.warning(
            "login_rejected",
            reason=reason,
            **self._get_context_kwargs(),
        )

    def code_exchange_failed(self, error: str) -> None:
        """Record that the identity provider's token endpoint failed."""
        self._logger.error(
            "login_code_exchange_failed",
            error=error,
            **{**self._get_context_kwargs(), "target_system": "identity_provider"},
        )

    def login_succeeded(self, identity_id: str) -> None:
        """Record that a user logged in."""
        self._logger.info(
            "login_succeeded",
            **{**self._get_context_kwargs(), "identity_id": identity_id},
        )
