"""HTTP routes for plant recognition."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from botany.application import RecognitionService
from botany.dependencies import get_recognition_service
from botany.ports.exceptions import RecognizerUnavailableError, UnknownImageError
from botany.presentation.models import RankedMatchResponse, RecognitionRequest
from iam.dependencies.identity import get_current_identity
from media.ports.exceptions import ObjectStoreError
from shared_kernel.auth import Identity

router = APIRouter(prefix="/plants", tags=["plants"])


@router.post("/recognise")
async def recognise_plant(
    request: RecognitionRequest,
    identity: Annotated[Identity, Depends(get_current_identity)],
    service: Annotated[RecognitionService, Depends(get_recognition_service)],
) -> list[RankedMatchResponse]:
    """Identify the plant shown in previously uploaded images.

    Returns:
        Up to ten species, best match first

    Raises:
        HTTPException: 400 if an image key is unknown,
            502 if the recognizer or the object store failed
    """
    location = request.location.to_domain() if request.location else None
    try:
        matches = await service.analyze_uploaded(request.images, location)
    except UnknownImageError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)
        ) from e
    except (RecognizerUnavailableError, ObjectStoreError) as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Plant recognition is unavailable",
        ) from e

    return [RankedMatchResponse.from_domain(match) for match in matches]
