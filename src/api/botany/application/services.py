"""Application service reconciling recognizer output with the species catalog.

The recognizer is an unreliable external classifier; the catalog is keyed by
taxonomy id. Each reported species is looked up (or inserted) once per
request, and the confidence is passed through untouched.
"""

from __future__ import annotations

import asyncio
from typing import Sequence

from botany.application.observability import (
    DefaultRecognitionServiceProbe,
    RecognitionServiceProbe,
)
from botany.domain.value_objects import (
    MAX_MATCHES,
    CoarseLocation,
    RankedMatch,
    RecognitionImage,
    SpeciesRecord,
)
from botany.ports.exceptions import RecognizerUnavailableError, UnknownImageError
from botany.ports.image_source import IImageSource
from botany.ports.recognizer import PlantRecognizer
from botany.ports.repositories import ISpeciesRepository


class RecognitionService:
    """Identifies plants and keeps the species catalog in step."""

    def __init__(
        self,
        recognizer: PlantRecognizer,
        species_repository: ISpeciesRepository,
        image_source: IImageSource | None = None,
        probe: RecognitionServiceProbe | None = None,
    ):
        """Initialize RecognitionService with dependencies.

        Args:
            recognizer: The external recognizer adapter
            species_repository: Repository for the species catalog
            image_source: Loader for uploaded images, needed by analyze_uploaded
            probe: Optional domain probe for observability
        """
        self._recognizer = recognizer
        self._species = species_repository
        self._images = image_source
        self._probe = probe or DefaultRecognitionServiceProbe()

    async def analyze(
        self,
        images: Sequence[RecognitionImage],
        location: CoarseLocation | None = None,
    ) -> list[RankedMatch]:
        """Recognize the plant shown in the images.

        Args:
            images: Photos of one plant
            location: Where they were taken (already coarse)

        Returns:
            At most ten matches, best first

        Raises:
            RecognizerUnavailableError: If the recognizer failed
        """
        if not images:
            return []

        self._probe.recognition_requested(image_count=len(images), location=location)
        try:
            candidates = await self._recognizer.identify(images, location)
        except RecognizerUnavailableError as e:
            self._probe.recognizer_failed(error=str(e))
            raise

        best = sorted(candidates, key=lambda c: c.score, reverse=True)[:MAX_MATCHES]

        reconciled: dict[str, SpeciesRecord] = {}
        matches: list[RankedMatch] = []
        for candidate in best:
            record = reconciled.get(candidate.taxonomy_id)
            if record is None:
                record = await self._species.get_or_create(candidate.to_record())
                reconciled[candidate.taxonomy_id] = record
            matches.append(RankedMatch(species=record, confidence=candidate.score))

        self._probe.recognition_completed(
            candidate_count=len(candidates), match_count=len(matches)
        )
        return matches

    async def analyze_uploaded(
        self,
        keys: Sequence[str],
        location: CoarseLocation | None = None,
    ) -> list[RankedMatch]:
        """Recognize the plant shown in previously uploaded images.

        Images are loaded concurrently.

        Raises:
            UnknownImageError: If a key names no stored image
            ObjectStoreError: If storage failed
            RecognizerUnavailableError: If the recognizer failed
        """
        if self._images is None:
            raise RuntimeError("RecognitionService has no image source configured")

        loaded = await asyncio.gather(*(self._images.load(key) for key in keys))

        images: list[RecognitionImage] = []
        for key, image in zip(keys, loaded):
            if image is None:
                self._probe.unknown_image(key=key)
                raise UnknownImageError(key)
            images.append(image)

        return await self.analyze(images, location)
