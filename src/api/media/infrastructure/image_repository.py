"""PostgreSQL implementation of IImageRepository."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from sqlalchemy import column, delete, exists, select, table
from sqlalchemy.ext.asyncio import AsyncSession

from media.domain.value_objects import ImageKey, StoredImage
from media.infrastructure.models import ImageModel
from media.ports.repositories import IImageRepository

# Listings are managed outside this context; only the thumbnail reference matters here
_listings = table("listings", column("thumbnail"))


class ImageRepository(IImageRepository):
    """PostgreSQL-backed repository for image metadata."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: AsyncSession from FastAPI dependency injection
        """
        self._session = session

    async def add(self, image: StoredImage) -> None:
        async with self._session.begin():
            self._session.add(
                ImageModel(
                    key=image.key.value,
                    owner_id=image.owner_id,
                    uploaded_at=image.uploaded_at,
                )
            )

    async def list_purgeable(self, uploaded_before: datetime) -> list[ImageKey]:
        stmt = (
            select(ImageModel.key)
            .where(ImageModel.uploaded_at < uploaded_before)
            .where(~exists().where(_listings.c.thumbnail == ImageModel.key))
            .order_by(ImageModel.key)
        )
        async with self._session.begin():
            result = await self._session.execute(stmt)
            return [ImageKey(value=key) for key in result.scalars().all()]

    async def delete(self, keys: Sequence[ImageKey]) -> int:
        if not keys:
            return 0
        stmt = delete(ImageModel).where(ImageModel.key.in_([k.value for k in keys]))
        async with self._session.begin():
            result = await self._session.execute(stmt)
            return result.rowcount or 0
