"""Application service for image ingestion and retrieval.

Uploads are written to the object store first and recorded in the
``images`` table second. There is no compensating action if the second
write fails; the failure is logged as ``image_metadata_write_failed`` with
the orphaned key and surfaced as ImageMetadataWriteError.
"""

from __future__ import annotations

from datetime import datetime, timezone

from media.application.observability import (
    DefaultImageServiceProbe,
    ImageServiceProbe,
)
from media.domain.value_objects import (
    ALLOWED_MEDIA_TYPES,
    ImageKey,
    StoredImage,
    StoredObject,
)
from media.ports.exceptions import (
    EmptyImageError,
    ImageMetadataWriteError,
    ImageTooLargeError,
    ObjectStoreError,
    UnsupportedMediaTypeError,
)
from media.ports.object_store import IObjectStore
from media.ports.repositories import IImageRepository

# S3 DeleteObjects accepts at most 1000 keys per call
_DELETE_BATCH_SIZE = 1000


class ImageService:
    """Stores, fetches and cleans up uploaded images."""

    def __init__(
        self,
        object_store: IObjectStore,
        image_repository: IImageRepository,
        max_upload_bytes: int,
        probe: ImageServiceProbe | None = None,
    ):
        """Initialize ImageService with dependencies.

        Args:
            object_store: Blob storage for image bytes
            image_repository: Repository for ownership metadata
            max_upload_bytes: Largest accepted upload
            probe: Optional domain probe for observability
        """
        self._objects = object_store
        self._images = image_repository
        self._max_upload_bytes = max_upload_bytes
        self._probe = probe or DefaultImageServiceProbe()

    async def store(
        self, owner_id: str | None, content: bytes, media_type: str
    ) -> ImageKey:
        """Validate and store an uploaded image.

        Validation happens before any network call.

        Args:
            owner_id: Identity id of the uploader
            content: Image bytes
            media_type: Declared content type

        Returns:
            The new image's key

        Raises:
            UnsupportedMediaTypeError: If media_type is not JPEG or PNG
            EmptyImageError: If content is empty
            ImageTooLargeError: If content exceeds the size cap
            ObjectStoreError: If the object store write failed
            ImageMetadataWriteError: If the object was stored but the
                metadata row was not
        """
        size = len(content)
        if media_type not in ALLOWED_MEDIA_TYPES:
            self._probe.upload_rejected("unsupported_media_type", media_type, size)
            raise UnsupportedMediaTypeError(
                f'Media type "{media_type}" is not supported, '
                'use "image/png" or "image/jpeg"'
            )
        if size == 0:
            self._probe.upload_rejected("empty", media_type, size)
            raise EmptyImageError("Uploaded image is empty")
        if size > self._max_upload_bytes:
            self._probe.upload_rejected("too_large", media_type, size)
            raise ImageTooLargeError(
                f"Uploaded image exceeds {self._max_upload_bytes} bytes"
            )

        key = ImageKey.generate()
        try:
            await self._objects.put(key.value, content, media_type)
        except ObjectStoreError as e:
            self._probe.object_store_failed("put", str(e), key=key.value)
            raise

        image = StoredImage(
            key=key,
            owner_id=owner_id,
            uploaded_at=datetime.now(timezone.utc),
        )
        try:
            await self._images.add(image)
        except Exception as e:
            self._probe.metadata_write_failed(key=key.value, error=str(e))
            raise ImageMetadataWriteError(
                f"Image {key} stored but its metadata was not recorded", key=key.value
            ) from e

        self._probe.image_stored(key=key.value, owner_id=owner_id, size=size)
        return key

    async def fetch(self, key: ImageKey) -> StoredObject | None:
        """Load an image.

        Returns:
            The image bytes and media type, or None if no such image exists

        Raises:
            ObjectStoreError: If the object store failed
        """
        try:
            stored = await self._objects.get(key.value)
        except ObjectStoreError as e:
            self._probe.object_store_failed("get", str(e), key=key.value)
            raise
        if stored is None:
            self._probe.image_not_found(key=key.value)
        return stored

    async def purge_uploaded_before(self, cutoff: datetime) -> int:
        """Delete images uploaded before a cutoff that no listing uses.

        Objects are deleted before metadata, so an interrupted purge leaves
        rows pointing at missing objects (served as not found) rather than
        untracked objects.

        Returns:
            Number of images deleted

        Raises:
            ObjectStoreError: If the object store failed
        """
        keys = await self._images.list_purgeable(uploaded_before=cutoff)
        deleted = 0
        for start in range(0, len(keys), _DELETE_BATCH_SIZE):
            batch = keys[start : start + _DELETE_BATCH_SIZE]
            try:
                await self._objects.delete_many([k.value for k in batch])
            except ObjectStoreError as e:
                self._probe.object_store_failed("delete", str(e))
                raise
            deleted += await self._images.delete(batch)

        self._probe.images_purged(count=deleted, uploaded_before=cutoff.isoformat())
        return deleted
