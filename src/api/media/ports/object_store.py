"""Port for blob storage of image bytes."""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from media.domain.value_objects import StoredObject


@runtime_checkable
class IObjectStore(Protocol):
    """Key/value blob storage."""

    async def put(self, key: str, content: bytes, media_type: str) -> None:
        """Store bytes under a key.

        Raises:
            ObjectStoreError: On any storage failure
        """
        ...

    async def get(self, key: str) -> StoredObject | None:
        """Load bytes for a key.

        Returns:
            The object, or None if no object exists under the key

        Raises:
            ObjectStoreError: On any other storage failure
        """
        ...

    async def delete_many(self, keys: Sequence[str]) -> None:
        """Delete objects. Unknown keys are ignored.

        Raises:
            ObjectStoreError: On any storage failure
        """
        ...
