"""Ports (interfaces) for the Botany bounded context."""

from botany.ports.exceptions import RecognizerUnavailableError, UnknownImageError
from botany.ports.image_source import IImageSource
from botany.ports.recognizer import PlantRecognizer
from botany.ports.repositories import ISpeciesRepository

__all__ = [
    "IImageSource",
    "ISpeciesRepository",
    "PlantRecognizer",
    "RecognizerUnavailableError",
    "UnknownImageError",
]
