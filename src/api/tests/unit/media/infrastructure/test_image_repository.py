"""Unit tests for ImageRepository."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from media.domain.value_objects import ImageKey, StoredImage
from media.infrastructure.image_repository import ImageRepository
from media.infrastructure.models import ImageModel


class TestImageRepository:
    """Tests for ImageRepository with a mocked session."""

    @pytest.mark.asyncio
    async def test_add_records_owner(self, mock_session):
        repo = ImageRepository(session=mock_session)
        key = ImageKey.generate()
        uploaded_at = datetime.now(timezone.utc)

        await repo.add(StoredImage(key=key, owner_id="user-123", uploaded_at=uploaded_at))

        model = mock_session.add.call_args.args[0]
        assert isinstance(model, ImageModel)
        assert model.key == key.value
        assert model.owner_id == "user-123"
        assert model.uploaded_at == uploaded_at

    @pytest.mark.asyncio
    async def test_list_purgeable_skips_listing_thumbnails(self, mock_session):
        """Images still used as a listing thumbnail are never purged."""
        keys = [ImageKey.generate().value]
        result = MagicMock()
        result.scalars.return_value.all.return_value = keys
        mock_session.execute.return_value = result
        repo = ImageRepository(session=mock_session)

        found = await repo.list_purgeable(datetime.now(timezone.utc))

        assert found == [ImageKey(value=keys[0])]
        sql = str(
            mock_session.execute.call_args.args[0].compile(
                dialect=postgresql.dialect()
            )
        )
        assert "NOT (EXISTS" in sql or "NOT EXISTS" in sql
        assert "listings.thumbnail = images.key" in sql

    @pytest.mark.asyncio
    async def test_delete_returns_rowcount(self, mock_session):
        result = MagicMock()
        result.rowcount = 2
        mock_session.execute.return_value = result
        repo = ImageRepository(session=mock_session)

        deleted = await repo.delete([ImageKey.generate(), ImageKey.generate()])

        assert deleted == 2

    @pytest.mark.asyncio
    async def test_delete_nothing(self, mock_session):
        repo = ImageRepository(session=mock_session)

        assert await repo.delete([]) == 0
        mock_session.execute.assert_not_awaited()
