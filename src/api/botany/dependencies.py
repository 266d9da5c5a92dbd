"""Dependency injection for the Botany bounded context."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from botany.application import RecognitionService
from botany.infrastructure.media_image_source import MediaImageSource
from botany.infrastructure.plantnet_recognizer import PlantNetRecognizer
from botany.infrastructure.species_repository import SpeciesRepository
from botany.ports.recognizer import PlantRecognizer
from infrastructure.database.dependencies import get_session
from infrastructure.settings import get_recognition_settings
from media.application import ImageService
from media.dependencies import get_image_service


@lru_cache
def get_plant_recognizer() -> PlantRecognizer:
    """Get the configured recognizer adapter."""
    return PlantNetRecognizer(settings=get_recognition_settings())


def get_recognition_service(
    session: Annotated[AsyncSession, Depends(get_session)],
    recognizer: Annotated[PlantRecognizer, Depends(get_plant_recognizer)],
    image_service: Annotated[ImageService, Depends(get_image_service)],
) -> RecognitionService:
    """Get RecognitionService instance.

    Args:
        session: Database session
        recognizer: Shared recognizer adapter
        image_service: Media service used to load uploaded images

    Returns:
        RecognitionService reading images from the Media context
    """
    return RecognitionService(
        recognizer=recognizer,
        species_repository=SpeciesRepository(session=session),
        image_source=MediaImageSource(image_service=image_service),
    )
