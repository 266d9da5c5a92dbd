"""Domain layer for the Botany bounded context."""

from botany.domain.value_objects import (
    MAX_MATCHES,
    CoarseLocation,
    Habitat,
    RankedMatch,
    RecognitionImage,
    SpeciesCandidate,
    SpeciesRecord,
)

__all__ = [
    "MAX_MATCHES",
    "CoarseLocation",
    "Habitat",
    "RankedMatch",
    "RecognitionImage",
    "SpeciesCandidate",
    "SpeciesRecord",
]
