"""Application layer for the Botany bounded context."""

from botany.application.services import RecognitionService

__all__ = ["RecognitionService"]
