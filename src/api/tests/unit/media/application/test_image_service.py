"""Unit tests for ImageService.

The object store and image repository are mocked; the tests check what
reaches them and in which order.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock, call, create_autospec

import pytest
from ulid import ULID

from media.application import ImageService
from media.application.observability import ImageServiceProbe
from media.domain.value_objects import ImageKey, StoredImage, StoredObject
from media.ports.exceptions import (
    EmptyImageError,
    ImageMetadataWriteError,
    ImageTooLargeError,
    ObjectStoreError,
    UnsupportedMediaTypeError,
)
from media.ports.object_store import IObjectStore
from media.ports.repositories import IImageRepository

MAX_BYTES = 1024
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture
def mock_object_store() -> AsyncMock:
    return create_autospec(IObjectStore, instance=True)


@pytest.fixture
def mock_image_repository() -> AsyncMock:
    return create_autospec(IImageRepository, instance=True)


@pytest.fixture
def mock_probe() -> MagicMock:
    return MagicMock(spec=ImageServiceProbe)


@pytest.fixture
def service(mock_object_store, mock_image_repository, mock_probe) -> ImageService:
    return ImageService(
        object_store=mock_object_store,
        image_repository=mock_image_repository,
        max_upload_bytes=MAX_BYTES,
        probe=mock_probe,
    )


class TestStore:
    """Tests for ImageService.store."""

    @pytest.mark.asyncio
    async def test_stores_object_then_metadata(
        self, service, mock_object_store, mock_image_repository, mock_probe
    ):
        key = await service.store("user-123", PNG_BYTES, "image/png")

        ULID.from_str(key.value)
        mock_object_store.put.assert_awaited_once_with(key.value, PNG_BYTES, "image/png")
        stored: StoredImage = mock_image_repository.add.await_args.args[0]
        assert stored.key == key
        assert stored.owner_id == "user-123"
        assert stored.uploaded_at.tzinfo is not None
        mock_probe.image_stored.assert_called_once_with(
            key=key.value, owner_id="user-123", size=len(PNG_BYTES)
        )

    @pytest.mark.asyncio
    async def test_keys_are_unique(self, service):
        first = await service.store("user-123", PNG_BYTES, "image/png")
        second = await service.store("user-123", PNG_BYTES, "image/png")

        assert first != second

    @pytest.mark.asyncio
    @pytest.mark.parametrize("media_type", ["image/gif", "application/pdf", ""])
    async def test_rejects_unsupported_type_before_io(
        self, service, mock_object_store, mock_image_repository, media_type
    ):
        with pytest.raises(UnsupportedMediaTypeError):
            await service.store("user-123", PNG_BYTES, media_type)

        mock_object_store.put.assert_not_awaited()
        mock_image_repository.add.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rejects_empty_upload(self, service, mock_object_store):
        with pytest.raises(EmptyImageError):
            await service.store("user-123", b"", "image/jpeg")

        mock_object_store.put.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rejects_oversize_upload(self, service, mock_object_store, mock_probe):
        with pytest.raises(ImageTooLargeError):
            await service.store("user-123", b"x" * (MAX_BYTES + 1), "image/jpeg")

        mock_object_store.put.assert_not_awaited()
        mock_probe.upload_rejected.assert_called_once_with(
            "too_large", "image/jpeg", MAX_BYTES + 1
        )

    @pytest.mark.asyncio
    async def test_accepts_upload_at_cap(self, service):
        await service.store("user-123", b"x" * MAX_BYTES, "image/jpeg")

    @pytest.mark.asyncio
    async def test_object_store_failure_skips_metadata(
        self, service, mock_object_store, mock_image_repository
    ):
        mock_object_store.put.side_effect = ObjectStoreError("bucket unreachable")

        with pytest.raises(ObjectStoreError):
            await service.store("user-123", PNG_BYTES, "image/png")

        mock_image_repository.add.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_metadata_failure_is_reported_with_key(
        self, service, mock_image_repository, mock_probe
    ):
        """A stored object without a row is surfaced and logged distinctly."""
        mock_image_repository.add.side_effect = RuntimeError("connection reset")

        with pytest.raises(ImageMetadataWriteError) as exc_info:
            await service.store("user-123", PNG_BYTES, "image/png")

        mock_probe.metadata_write_failed.assert_called_once_with(
            key=exc_info.value.key, error="connection reset"
        )
        mock_probe.image_stored.assert_not_called()


class TestFetch:
    """Tests for ImageService.fetch."""

    @pytest.mark.asyncio
    async def test_returns_stored_object(self, service, mock_object_store):
        stored = StoredObject(content=PNG_BYTES, media_type="image/png")
        mock_object_store.get.return_value = stored
        key = ImageKey.generate()

        assert await service.fetch(key) == stored
        mock_object_store.get.assert_awaited_once_with(key.value)

    @pytest.mark.asyncio
    async def test_missing_image(self, service, mock_object_store, mock_probe):
        mock_object_store.get.return_value = None
        key = ImageKey.generate()

        assert await service.fetch(key) is None
        mock_probe.image_not_found.assert_called_once_with(key=key.value)


class TestPurge:
    """Tests for ImageService.purge_uploaded_before."""

    @pytest.mark.asyncio
    async def test_deletes_objects_before_metadata(
        self, service, mock_object_store, mock_image_repository
    ):
        keys = [ImageKey.generate() for _ in range(3)]
        mock_image_repository.list_purgeable.return_value = keys
        mock_image_repository.delete.return_value = 3
        manager = MagicMock()
        manager.attach_mock(mock_object_store.delete_many, "delete_many")
        manager.attach_mock(mock_image_repository.delete, "delete")
        cutoff = datetime.now(timezone.utc) - timedelta(days=30)

        deleted = await service.purge_uploaded_before(cutoff)

        assert deleted == 3
        mock_image_repository.list_purgeable.assert_awaited_once_with(
            uploaded_before=cutoff
        )
        assert manager.mock_calls == [
            call.delete_many([k.value for k in keys]),
            call.delete(keys),
        ]

    @pytest.mark.asyncio
    async def test_batches_large_purges(
        self, service, mock_object_store, mock_image_repository
    ):
        keys = [ImageKey.generate() for _ in range(2500)]
        mock_image_repository.list_purgeable.return_value = keys
        mock_image_repository.delete.side_effect = lambda batch: len(batch)

        deleted = await service.purge_uploaded_before(datetime.now(timezone.utc))

        assert deleted == 2500
        batch_sizes = [
            len(c.args[0]) for c in mock_object_store.delete_many.await_args_list
        ]
        assert batch_sizes == [1000, 1000, 500]

    @pytest.mark.asyncio
    async def test_object_store_failure_keeps_metadata(
        self, service, mock_object_store, mock_image_repository
    ):
        mock_image_repository.list_purgeable.return_value = [ImageKey.generate()]
        mock_object_store.delete_many.side_effect = ObjectStoreError("denied")

        with pytest.raises(ObjectStoreError):
            await service.purge_uploaded_before(datetime.now(timezone.utc))

        mock_image_repository.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_nothing_to_purge(self, service, mock_object_store, mock_image_repository):
        mock_image_repository.list_purgeable.return_value = []

        assert await service.purge_uploaded_before(datetime.now(timezone.utc)) == 0
        mock_object_store.delete_many.assert_not_awaited()
