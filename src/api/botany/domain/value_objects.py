"""Value objects for the Botany domain."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import StrEnum

# Upper bound on matches returned for one recognition request
MAX_MATCHES = 10

_ONE_DECIMAL = Decimal("0.1")


class Habitat(StrEnum):
    """Where a species is usually grown."""

    INDOOR = "indoor"
    OUTDOOR = "outdoor"


@dataclass(frozen=True)
class SpeciesRecord:
    """An entry of the local species catalog.

    Keyed by the POWO taxonomy id. Records are created the first time the
    recognizer reports a species and are never updated afterwards.
    """

    taxonomy_id: str
    scientific_name: str
    common_name: str
    gbif_id: int | None = None
    habitat: Habitat | None = None
    produces_fruit: bool | None = None
    description: str = ""


@dataclass(frozen=True)
class SpeciesCandidate:
    """One species as reported by a recognizer, before reconciliation."""

    taxonomy_id: str
    scientific_name: str
    score: float
    common_names: tuple[str, ...] = ()
    gbif_id: int | None = None

    def to_record(self) -> SpeciesRecord:
        """Build the catalog record to insert if the species is new.

        The common name is the first alias the recognizer gave, or the
        scientific name when it gave none.
        """
        common_name = self.common_names[0] if self.common_names else self.scientific_name
        return SpeciesRecord(
            taxonomy_id=self.taxonomy_id,
            scientific_name=self.scientific_name,
            common_name=common_name,
            gbif_id=self.gbif_id,
        )


@dataclass(frozen=True)
class RankedMatch:
    """A catalog species with the recognizer's confidence, in [0, 1]."""

    species: SpeciesRecord
    confidence: float


@dataclass(frozen=True)
class CoarseLocation:
    """A point rounded to one decimal degree (about 11 km).

    Rounding happens on construction, half away from zero, so a precise
    user location can never reach a recognition request.
    """

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"Latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"Longitude out of range: {self.longitude}")
        object.__setattr__(self, "latitude", _round_coordinate(self.latitude))
        object.__setattr__(self, "longitude", _round_coordinate(self.longitude))


def _round_coordinate(value: float) -> float:
    # str() first so 0.05 rounds as written rather than as its binary value
    return float(Decimal(str(value)).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class RecognitionImage:
    """Image bytes submitted to a recognizer."""

    content: bytes
    filename: str
    media_type: str = "image/jpeg"
