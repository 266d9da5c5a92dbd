"""Domain probes for plant recognition."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from botany.domain.value_objects import CoarseLocation
    from shared_kernel.observability_context import ObservationContext


class RecognitionServiceProbe(Protocol):
    """Domain probe for recognition requests."""

    def recognition_requested(
        self, image_count: int, location: CoarseLocation | None
    ) -> None:
        """Record that images were submitted for recognition."""
        ...

    def recognition_completed(self, candidate_count: int, match_count: int) -> None:
        """Record that recognition results were reconciled."""
        ...

    def recognizer_failed(self, error: str) -> None:
        """Record that the external recognizer failed."""
        ...

    def unknown_image(self, key: str) -> None:
        """Record that a request named an image that does not exist."""
        ...

    def with_context(self, context: ObservationContext) -> RecognitionServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultRecognitionServiceProbe:
    """Default implementation of RecognitionServiceProbe using structlog."""

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

    def with_context(
        self, context: ObservationContext
    ) -> DefaultRecognitionServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultRecognitionServiceProbe(logger=self._logger, context=context)

    def recognition_requested(
        self, image_count: int, location: CoarseLocation | None
    ) -> None:
        self._logger.info(
            "plant_recognition_requested",
            image_count=image_count,
            latitude=location.latitude if location else None,
            longitude=location.longitude if location else None,
            **self._get_context_kwargs(),
        )

    def recognition_completed(self, candidate_count: int, match_count: int) -> None:
        self._logger.info(
            "plant_recognition_completed",
            candidate_count=candidate_count,
            match_count=match_count,
            **self._get_context_kwargs(),
        )

    def recognizer_failed(self, error: str) -> None:
        self._logger.error(
            "plant_recognizer_failed",
            error=error,
            **{**self._get_context_kwargs(), "target_system": "recognizer"},
        )

    def unknown_image(self, key: str) -> None:
        self._logger.info(
            "plant_recognition_unknown_image",
            key=key,
            **self._get_context_kwargs(),
        )
