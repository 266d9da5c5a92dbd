"""Observation context for domain-oriented observability.

Observation contexts collect and manage contextual metadata for instrumentation,
following the Domain Oriented Observability pattern.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Attributes:
        request_id: Unique identifier for the current request/operation.
        identity_id: Identity performing the operation (if known).
        target_system: External system the operation talks to (if any).
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(request_id="req-123", target_system="plantnet")
        probe = DefaultRecognitionServiceProbe().with_context(context)
    """

    request_id: str | None = None
    identity_id: str | None = None
    target_system: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self.identity_id is not None:
            result["identity_id"] = self.identity_id
        if self.target_system is not None:
            result["target_system"] = self.target_system
        result.update(self.extra)
        return result

    def with_identity(self, identity_id: str) -> ObservationContext:
        """Create a new context with the identity set."""
        return ObservationContext(
            request_id=self.request_id,
            identity_id=identity_id,
            target_system=self.target_system,
            extra=self.extra,
        )

    def with_extra(self, **kwargs: Any) -> ObservationContext:
        """Create a new context with additional metadata."""
        return ObservationContext(
            request_id=self.request_id,
            identity_id=self.identity_id,
            target_system=self.target_system,
            extra={**self.extra, **kwargs},
        )
