"""Repository protocols (ports) for the Media bounded context."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence, runtime_checkable

from media.domain.value_objects import ImageKey, StoredImage


@runtime_checkable
class IImageRepository(Protocol):
    """Repository for image ownership metadata."""

    async def add(self, image: StoredImage) -> None:
        """Record a newly stored image."""
        ...

    async def list_purgeable(self, uploaded_before: datetime) -> list[ImageKey]:
        """List images uploaded before a cutoff that no listing uses."""
        ...

    async def delete(self, keys: Sequence[ImageKey]) -> int:
        """Delete metadata rows.

        Returns:
            Number of rows removed
        """
        ...
