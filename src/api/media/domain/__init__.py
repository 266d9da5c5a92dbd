"""Domain layer for the Media bounded context."""

from media.domain.value_objects import (
    ALLOWED_MEDIA_TYPES,
    ImageKey,
    StoredImage,
    StoredObject,
)

__all__ = [
    "ALLOWED_MEDIA_TYPES",
    "ImageKey",
    "StoredImage",
    "StoredObject",
]
