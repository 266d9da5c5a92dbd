"""Value objects for the Media domain."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ulid import ULID

ALLOWED_MEDIA_TYPES = frozenset({"image/jpeg", "image/png"})


@dataclass(frozen=True)
class ImageKey:
    """Identifier of a stored image, also its object-store key.

    Uses ULID so keys sort by upload time without a separate index.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> ImageKey:
        """Generate a new ImageKey using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> ImageKey:
        """Create ImageKey from string value.

        Args:
            value: ULID string

        Returns:
            ImageKey instance

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid ImageKey: {value}") from e

        return cls(value=value)


@dataclass(frozen=True)
class StoredImage:
    """Ownership metadata recorded for an uploaded image."""

    key: ImageKey
    owner_id: str | None
    uploaded_at: datetime


@dataclass(frozen=True)
class StoredObject:
    """Image bytes as returned by the object store."""

    content: bytes
    media_type: str
