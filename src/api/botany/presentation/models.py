"""Pydantic models for plant recognition requests and responses."""

from __future__ import annotations

from pydantic import BaseModel, Field

from botany.domain.value_objects import CoarseLocation, RankedMatch, SpeciesRecord


class LocationModel(BaseModel):
    """Where the photos were taken. Rounded to 0.1 degree before use."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

    def to_domain(self) -> CoarseLocation:
        """Convert to a coarse domain location."""
        return CoarseLocation(latitude=self.latitude, longitude=self.longitude)


class RecognitionRequest(BaseModel):
    """Request model for recognizing uploaded images."""

    images: list[str] = Field(
        ...,
        min_length=1,
        max_length=5,
        description="Keys of previously uploaded images",
    )
    location: LocationModel | None = None


class SpeciesResponse(BaseModel):
    """Response model for a catalog species."""

    taxonomy_id: str
    gbif_id: int | None = None
    common_name: str
    scientific_name: str
    habitat: str | None = None
    produces_fruit: bool | None = None
    description: str = ""

    @classmethod
    def from_domain(cls, record: SpeciesRecord) -> SpeciesResponse:
        """Convert a domain SpeciesRecord to an API response."""
        return cls(
            taxonomy_id=record.taxonomy_id,
            gbif_id=record.gbif_id,
            common_name=record.common_name,
            scientific_name=record.scientific_name,
            habitat=record.habitat.value if record.habitat else None,
            produces_fruit=record.produces_fruit,
            description=record.description,
        )


class RankedMatchResponse(BaseModel):
    """Response model for one recognition match."""

    species: SpeciesResponse
    confidence: float = Field(..., description="Match confidence in [0, 1]")

    @classmethod
    def from_domain(cls, match: RankedMatch) -> RankedMatchResponse:
        """Convert a domain RankedMatch to an API response."""
        return cls(
            species=SpeciesResponse.from_domain(match.species),
            confidence=match.confidence,
        )
