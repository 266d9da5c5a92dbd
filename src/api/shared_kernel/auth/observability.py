"""Domain probes for token verification and signing key retrieval.

Following Domain-Oriented Observability patterns, these probes capture
domain-significant events related to bearer token verification.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TokenVerifierProbe(Protocol):
    """Domain probe for bearer token verification."""

    def token_verified(self, identity_id: str, key_id: str) -> None:
        """Record that a token was successfully verified."""
        ...

    def token_rejected(self, reason: str, key_id: str | None = None) -> None:
        """Record that a token failed verification."""
        ...

    def with_context(self, context: ObservationContext) -> TokenVerifierProbe:
        """Create a new probe with observation context bound."""
        ...


class SigningKeysProbe(Protocol):
    """Domain probe for the identity provider's published signing keys."""

    def keys_fetched(self, key_count: int) -> None:
        """Record that the key set was fetched from the identity provider."""
        ...

    def keys_fetch_failed(self, error: str, keys_loaded: bool) -> None:
        """Record that fetching the key set failed."""
        ...

    def refresh_suppressed(self, key_id: str) -> None:
        """Record that an unknown key id did not trigger a refresh (cooldown)."""
        ...


class DefaultTokenVerifierProbe:
    """Default implementation of TokenVerifierProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTokenVerifierProbe:
        """Create a new probe with observation context bound."""
        return DefaultTokenVerifierProbe(logger=self._logger, context=context)

    def token_verified(self, identity_id: str, key_id: str) -> None:
        """Record that a token was successfully verified."""
        self._logger.debug(
            "token_verified",
            identity_id=identity_id,
            key_id=key_id,
            **self._get_context_kwargs(),
        )

    def token_rejected(self, reason: str, key_id: str | None = None) -> None:
        """Record that a token failed verification."""
        self._logger.warning(
            "token_rejected",
            reason=reason,
            key_id=key_id,
            **self._get_context_kwargs(),
        )


class DefaultSigningKeysProbe:
    """Default implementation of SigningKeysProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def keys_fetched(self, key_count: int) -> None:
        """Record that the key set was fetched from the identity provider."""
        self._logger.info(
            "signing_keys_fetched",
            key_count=key_count,
            target_system="identity_provider",
        )

    def keys_fetch_failed(self, error: str, keys_loaded: bool) -> None:
        """Record that fetching the key set failed."""
        self._logger.error(
            "signing_keys_fetch_failed",
            error=error,
            keeping_previous_keys=keys_loaded,
            target_system="identity_provider",
        )

    def refresh_suppressed(self, key_id: str) -> None:
        """Record that an unknown key id did not trigger a refresh (cooldown)."""
        self._logger.info(
            "signing_keys_refresh_suppressed",
            key_id=key_id,
        )
