"""Botany presentation layer."""

from botany.presentation.routes import router

__all__ = ["router"]
