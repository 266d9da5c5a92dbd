"""Application layer for the Media bounded context."""

from media.application.services import ImageService

__all__ = ["ImageService"]
