"""Port for external plant recognizers."""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from botany.domain.value_objects import (
    CoarseLocation,
    RecognitionImage,
    SpeciesCandidate,
)


@runtime_checkable
class PlantRecognizer(Protocol):
    """Identifies plant species from photos.

    Implementations only talk to the recognizer; reconciling the results
    against the local catalog is the application service's job.
    """

    async def identify(
        self,
        images: Sequence[RecognitionImage],
        location: CoarseLocation | None = None,
    ) -> list[SpeciesCandidate]:
        """Submit images and return the species candidates found.

        Args:
            images: One or more photos of the same plant
            location: Where the photos were taken, already coarsened

        Returns:
            Candidates in no guaranteed order; empty if nothing was recognized

        Raises:
            RecognizerUnavailableError: On transport or protocol failure
        """
        ...
