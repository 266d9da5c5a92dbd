"""Ports (interfaces) for the Media bounded context."""

from media.ports.exceptions import (
    EmptyImageError,
    ImageMetadataWriteError,
    ImageTooLargeError,
    ObjectStoreError,
    UnsupportedMediaTypeError,
)
from media.ports.object_store import IObjectStore
from media.ports.repositories import IImageRepository

__all__ = [
    "EmptyImageError",
    "IImageRepository",
    "IObjectStore",
    "ImageMetadataWriteError",
    "ImageTooLargeError",
    "ObjectStoreError",
    "UnsupportedMediaTypeError",
]
