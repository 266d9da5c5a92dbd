"""Media presentation layer."""

from media.presentation.routes import router

__all__ = ["router"]
