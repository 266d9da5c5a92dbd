"""Pydantic models for image API responses."""

from pydantic import BaseModel, Field


class ImageUploadResponse(BaseModel):
    """Response model for a stored upload."""

    key: str = Field(..., description="Image key (ULID format)")


class ImagePurgeResponse(BaseModel):
    """Response model for a bulk cleanup."""

    deleted: int = Field(..., description="Number of images deleted")
