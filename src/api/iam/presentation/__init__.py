"""IAM presentation layer - browser login flow and identity endpoints."""

from iam.presentation.routes import router

__all__ = ["router"]
