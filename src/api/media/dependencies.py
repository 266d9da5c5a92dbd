"""Dependency injection for the Media bounded context."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_session
from infrastructure.settings import get_storage_settings
from media.application import ImageService
from media.infrastructure.image_repository import ImageRepository
from media.infrastructure.s3_object_store import S3ObjectStore, create_s3_client
from media.ports.object_store import IObjectStore


@lru_cache
def get_object_store() -> IObjectStore:
    """Get the process-wide object store.

    boto3 clients are thread-safe, so one client serves every request.
    """
    settings = get_storage_settings()
    return S3ObjectStore(
        client=create_s3_client(settings),
        bucket=settings.images_bucket,
    )


def get_image_service(
    session: Annotated[AsyncSession, Depends(get_session)],
    object_store: Annotated[IObjectStore, Depends(get_object_store)],
) -> ImageService:
    """Get ImageService instance.

    Args:
        session: Database session
        object_store: Shared object store

    Returns:
        ImageService configured with the upload size cap
    """
    return ImageService(
        object_store=object_store,
        image_repository=ImageRepository(session=session),
        max_upload_bytes=get_storage_settings().max_upload_bytes,
    )
