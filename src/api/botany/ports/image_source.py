"""Port through which recognition loads previously uploaded images."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from botany.domain.value_objects import RecognitionImage


@runtime_checkable
class IImageSource(Protocol):
    """Loads stored images by key."""

    async def load(self, key: str) -> RecognitionImage | None:
        """Load an image.

        Returns:
            The image, or None if no image exists under the key

        Raises:
            ObjectStoreError: If storage failed
        """
        ...
