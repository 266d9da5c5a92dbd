"""HTTP routes for image upload, download and cleanup."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from fastapi import (
    APIRouter,
    Depends,
    File,
    HTTPException,
    Query,
    Response,
    UploadFile,
    status,
)

from iam.dependencies.identity import get_current_identity, require_capability
from infrastructure.settings import get_storage_settings
from media.application import ImageService
from media.dependencies import get_image_service
from media.domain.value_objects import ImageKey
from media.ports.exceptions import (
    EmptyImageError,
    ImageMetadataWriteError,
    ImageTooLargeError,
    ObjectStoreError,
    UnsupportedMediaTypeError,
)
from media.presentation.models import ImagePurgeResponse, ImageUploadResponse
from shared_kernel.auth import Capability, Identity

router = APIRouter(prefix="/images", tags=["images"])

IMMUTABLE_CACHE_CONTROL = "public, max-age=604800, immutable"


@router.post("", status_code=status.HTTP_201_CREATED)
async def upload_image(
    identity: Annotated[Identity, Depends(get_current_identity)],
    service: Annotated[ImageService, Depends(get_image_service)],
    picture: Annotated[UploadFile | None, File(description="JPEG or PNG image")] = None,
) -> ImageUploadResponse:
    """Upload one image.

    Returns:
        The generated image key

    Raises:
        HTTPException: 400 if the picture field is missing or empty,
            413 if it is too large, 415 if it is not JPEG or PNG,
            502 if the object store failed
    """
    if picture is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing picture field",
        )

    # Read one byte past the cap so oversize uploads are detected without
    # buffering the whole body
    content = await picture.read(get_storage_settings().max_upload_bytes + 1)
    try:
        key = await service.store(
            owner_id=identity.id,
            content=content,
            media_type=picture.content_type or "",
        )
    except UnsupportedMediaTypeError as e:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, detail=str(e)
        ) from e
    except ImageTooLargeError as e:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=str(e)
        ) from e
    except EmptyImageError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)
        ) from e
    except ObjectStoreError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Couldn't upload image",
        ) from e
    except ImageMetadataWriteError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Couldn't upload image",
        ) from e

    return ImageUploadResponse(key=key.value)


@router.get("/{key}")
async def get_image(
    key: str,
    service: Annotated[ImageService, Depends(get_image_service)],
) -> Response:
    """Download an image.

    Anonymous access is allowed. Images never change, so responses may be
    cached by browsers and proxies.

    Raises:
        HTTPException: 404 if no such image exists, 502 if the object store failed
    """
    try:
        image_key = ImageKey.from_string(key)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Couldn't find this image"
        ) from e

    try:
        stored = await service.fetch(image_key)
    except ObjectStoreError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Error occurred downloading the image",
        ) from e

    if stored is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Couldn't find this image"
        )

    return Response(
        content=stored.content,
        media_type=stored.media_type,
        headers={"Cache-Control": IMMUTABLE_CACHE_CONTROL},
    )


@router.delete("")
async def purge_images(
    uploaded_before: Annotated[datetime, Query(description="ISO 8601 cutoff")],
    identity: Annotated[Identity, Depends(require_capability(Capability.ADMIN))],
    service: Annotated[ImageService, Depends(get_image_service)],
) -> ImagePurgeResponse:
    """Delete images uploaded before a cutoff that no listing uses (admin only).

    Raises:
        HTTPException: 400 if the cutoff has no timezone, 502 if the object
            store failed
    """
    if uploaded_before.tzinfo is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="uploaded_before must include a timezone offset",
        )
    try:
        deleted = await service.purge_uploaded_before(uploaded_before)
    except ObjectStoreError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Error occurred deleting images",
        ) from e
    return ImagePurgeResponse(deleted=deleted)
