"""Domain probes for image storage operations.

The metadata-write failure gets its own event so orphaned objects can be
found in the logs and reconciled by hand.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ImageServiceProbe(Protocol):
    """Domain probe for image upload, fetch and cleanup."""

    def upload_rejected(self, reason: str, media_type: str, size: int) -> None:
        """Record that an upload failed validation."""
        ...

    def image_stored(self, key: str, owner_id: str | None, size: int) -> None:
        """Record that an image and its metadata were stored."""
        ...

    def object_store_failed(
        self, operation: str, error: str, key: str | None = None
    ) -> None:
        """Record that the object store failed."""
        ...

    def metadata_write_failed(self, key: str, error: str) -> None:
        """Record that an object was stored without its metadata row."""
        ...

    def image_not_found(self, key: str) -> None:
        """Record that a requested image does not exist."""
        ...

    def images_purged(self, count: int, uploaded_before: str) -> None:
        """Record that old images were deleted."""
        ...

    def with_context(self, context: ObservationContext) -> ImageServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultImageServiceProbe:
    """Default implementation of ImageServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultImageServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultImageServiceProbe(logger=self._logger, context=context)

    def upload_rejected(self, reason: str, media_type: str, size: int) -> None:
        self._logger.info(
            "image_upload_rejected",
            reason=reason,
            media_type=media_type,
            size=size,
            **self._get_context_kwargs(),
        )

    def image_stored(self, key: str, owner_id: str | None, size: int) -> None:
        self._logger.info(
            "image_stored",
            key=key,
            owner_id=owner_id,
            size=size,
            **self._get_context_kwargs(),
        )

    def object_store_failed(
        self, operation: str, error: str, key: str | None = None
    ) -> None:
        self._logger.error(
            "image_object_store_failed",
            operation=operation,
            key=key,
            error=error,
            **{**self._get_context_kwargs(), "target_system": "object_store"},
        )

    def metadata_write_failed(self, key: str, error: str) -> None:
        self._logger.error(
            "image_metadata_write_failed",
            key=key,
            error=error,
            orphaned_object=True,
            **self._get_context_kwargs(),
        )

    def image_not_found(self, key: str) -> None:
        self._logger.debug(
            "image_not_found",
            key=key,
            **self._get_context_kwargs(),
        )

    def images_purged(self, count: int, uploaded_before: str) -> None:
        self._logger.info(
            "images_purged",
            count=count,
            uploaded_before=uploaded_before,
            **self._get_context_kwargs(),
        )
