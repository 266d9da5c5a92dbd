"""Pl@ntNet v2 implementation of PlantRecognizer.

All images go into one multipart ``POST /identify/all`` request. Pl@ntNet
answers 404 when it recognizes nothing, which is reported as an empty
result rather than an error.
"""

from __future__ import annotations

import urllib.parse
from typing import Sequence

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from botany.domain.value_objects import (
    CoarseLocation,
    RecognitionImage,
    SpeciesCandidate,
)
from botany.ports.exceptions import RecognizerUnavailableError
from botany.ports.recognizer import PlantRecognizer
from infrastructure.settings import RecognitionSettings


class _Species(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    scientific_name_without_author: str = Field(alias="scientificNameWithoutAuthor")
    common_names: list[str] = Field(default_factory=list, alias="commonNames")


class _ExternalId(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | None = None


class _Result(BaseModel):
    model_config = ConfigDict(extra="ignore")

    score: float
    species: _Species
    gbif: _ExternalId | None = None
    powo: _ExternalId | None = None


class _IdentifyResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    results: list[_Result] = Field(default_factory=list)


class PlantNetRecognizer(PlantRecognizer):
    """Calls the Pl@ntNet identification API."""

    def __init__(self, settings: RecognitionSettings) -> None:
        """Initialize the recognizer.

        Args:
            settings: API URL, key, result cap, language and timeout
        """
        self._settings = settings
        self._identify_url = urllib.parse.urljoin(
            settings.api_url.rstrip("/") + "/", "identify/all"
        )

    async def identify(
        self,
        images: Sequence[RecognitionImage],
        location: CoarseLocation | None = None,
    ) -> list[SpeciesCandidate]:
        # Pl@ntNet's identify endpoint takes no location, so it is not sent
        params = {
            "nb-results": str(self._settings.max_results),
            "lang": self._settings.language,
            "api-key": self._settings.api_key.get_secret_value(),
        }
        files = [
            ("images", (image.filename, image.content, image.media_type))
            for image in images
        ]

        try:
            async with httpx.AsyncClient(
                timeout=self._settings.timeout_seconds
            ) as client:
                response = await client.post(
                    self._identify_url, params=params, files=files
                )
        except httpx.HTTPError as e:
            # The request URL carries the API key, so only the error type is kept
            raise RecognizerUnavailableError(
                f"Pl@ntNet unreachable: {type(e).__name__}"
            ) from e

        if response.status_code == httpx.codes.NOT_FOUND:
            return []
        if response.status_code != httpx.codes.OK:
            raise RecognizerUnavailableError(
                f"Pl@ntNet returned HTTP {response.status_code}"
            )

        try:
            body = _IdentifyResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise RecognizerUnavailableError("Pl@ntNet returned an invalid body") from e

        return [
            _to_candidate(result)
            for result in body.results
            if result.powo is not None and result.powo.id
        ]


def _to_candidate(result: _Result) -> SpeciesCandidate:
    return SpeciesCandidate(
        taxonomy_id=result.powo.id,  # type: ignore[union-attr]
        scientific_name=result.species.scientific_name_without_author,
        score=result.score,
        common_names=tuple(result.species.common_names),
        gbif_id=_parse_int(result.gbif.id if result.gbif else None),
    )


def _parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None
