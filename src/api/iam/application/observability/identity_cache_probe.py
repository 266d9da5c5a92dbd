"""Protocol and default implementation for identity cache observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class IdentityCacheProbe(Protocol):
    """Domain probe for the session-backed identity cache."""

    def credential_stored(self, identity_id: str) -> None:
        """Record that a credential was upserted."""
        ...

    def identity_resolved(self, identity_id: str) -> None:
        """Record that a stored credential still verifies."""
        ...

    def identity_not_resolved(self, identity_id: str, reason: str) -> None:
        """Record that a stored credential is missing or no longer valid."""
        ...

    def with_context(self, context: ObservationContext) -> IdentityCacheProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultIdentityCacheProbe:
    """Default implementation of IdentityCacheProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultIdentityCacheProbe:
        """Create a new probe with observation context bound."""
        return DefaultIdentityCacheProbe(logger=self._logger, context=context)

    def credential_stored(self, identity_id: str) -> None:
        self._logger.info(
            "session_credential_stored",
            **{**self._get_context_kwargs(), "identity_id": identity_id},
        )

    def identity_resolved(self, identity_id: str) -> None:
        self._logger.debug(
            "session_identity_resolved",
            **{**self._get_context_kwargs(), "identity_id": identity_id},
        )

    def identity_not_resolved(self, identity_id: str, reason: str) -> None:
        self._logger.info(
            "session_identity_not_resolved",
            reason=reason,
            **{**self._get_context_kwargs(), "identity_id": identity_id},
        )
