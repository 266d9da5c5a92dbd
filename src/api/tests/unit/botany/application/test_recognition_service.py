"""Unit tests for RecognitionService.

The recognizer, species repository and image source are mocked.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, create_autospec

import pytest

from botany.application import RecognitionService
from botany.application.observability import RecognitionServiceProbe
from botany.domain.value_objects import (
    CoarseLocation,
    RecognitionImage,
    SpeciesCandidate,
    SpeciesRecord,
)
from botany.ports.exceptions import RecognizerUnavailableError, UnknownImageError
from botany.ports.image_source import IImageSource
from botany.ports.recognizer import PlantRecognizer
from botany.ports.repositories import ISpeciesRepository

IMAGE = RecognitionImage(content=b"jpeg", filename="leaf.jpg")


def _candidate(taxonomy_id: str, score: float, name: str = "Plantus") -> SpeciesCandidate:
    return SpeciesCandidate(
        taxonomy_id=taxonomy_id,
        scientific_name=name,
        score=score,
        common_names=(f"common {name}",),
    )


@pytest.fixture
def mock_recognizer() -> AsyncMock:
    return create_autospec(PlantRecognizer, instance=True)


@pytest.fixture
def mock_species_repository() -> AsyncMock:
    """Repository that returns whatever record it is given."""
    repository = create_autospec(ISpeciesRepository, instance=True)
    repository.get_or_create.side_effect = lambda record: record
    return repository


@pytest.fixture
def mock_image_source() -> AsyncMock:
    return create_autospec(IImageSource, instance=True)


@pytest.fixture
def mock_probe() -> MagicMock:
    return MagicMock(spec=RecognitionServiceProbe)


@pytest.fixture
def service(
    mock_recognizer, mock_species_repository, mock_image_source, mock_probe
) -> RecognitionService:
    return RecognitionService(
        recognizer=mock_recognizer,
        species_repository=mock_species_repository,
        image_source=mock_image_source,
        probe=mock_probe,
    )


class TestAnalyze:
    """Tests for RecognitionService.analyze."""

    @pytest.mark.asyncio
    async def test_returns_matches_best_first(self, service, mock_recognizer):
        mock_recognizer.identify.return_value = [
            _candidate("tax-low", 0.1),
            _candidate("tax-high", 0.8),
            _candidate("tax-mid", 0.3),
        ]

        matches = await service.analyze([IMAGE])

        assert [m.species.taxonomy_id for m in matches] == [
            "tax-high",
            "tax-mid",
            "tax-low",
        ]
        assert [m.confidence for m in matches] == [0.8, 0.3, 0.1]

    @pytest.mark.asyncio
    async def test_caps_at_ten_matches(self, service, mock_recognizer):
        mock_recognizer.identify.return_value = [
            _candidate(f"tax-{i}", i / 20) for i in range(15)
        ]

        matches = await service.analyze([IMAGE])

        assert len(matches) == 10
        assert matches[0].species.taxonomy_id == "tax-14"

    @pytest.mark.asyncio
    async def test_duplicate_taxonomy_reconciled_once(
        self, service, mock_recognizer, mock_species_repository
    ):
        """Two reports of the same species make one catalog lookup."""
        mock_recognizer.identify.return_value = [
            _candidate("tax-1", 0.7, "Monstera deliciosa"),
            _candidate("tax-1", 0.2, "Monstera deliciosa"),
        ]

        matches = await service.analyze([IMAGE])

        mock_species_repository.get_or_create.assert_awaited_once()
        assert len(matches) == 2
        assert matches[0].species is matches[1].species
        assert [m.confidence for m in matches] == [0.7, 0.2]

    @pytest.mark.asyncio
    async def test_existing_catalog_entry_is_returned(
        self, service, mock_recognizer, mock_species_repository
    ):
        """Catalog records are never overwritten by recognizer data."""
        curated = SpeciesRecord(
            taxonomy_id="tax-1",
            scientific_name="Monstera deliciosa",
            common_name="Monstera",
            description="Curated text",
        )
        mock_species_repository.get_or_create.side_effect = None
        mock_species_repository.get_or_create.return_value = curated
        mock_recognizer.identify.return_value = [_candidate("tax-1", 0.9)]

        matches = await service.analyze([IMAGE])

        assert matches[0].species == curated

    @pytest.mark.asyncio
    async def test_no_images_skips_recognizer(self, service, mock_recognizer):
        assert await service.analyze([]) == []

        mock_recognizer.identify.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_nothing_recognized(self, service, mock_recognizer):
        mock_recognizer.identify.return_value = []

        assert await service.analyze([IMAGE]) == []

    @pytest.mark.asyncio
    async def test_location_is_passed_through(self, service, mock_recognizer):
        mock_recognizer.identify.return_value = []
        location = CoarseLocation(latitude=52.516, longitude=13.3777)

        await service.analyze([IMAGE], location)

        mock_recognizer.identify.assert_awaited_once_with([IMAGE], location)

    @pytest.mark.asyncio
    async def test_recognizer_failure_propagates(
        self, service, mock_recognizer, mock_species_repository, mock_probe
    ):
        mock_recognizer.identify.side_effect = RecognizerUnavailableError("HTTP 500")

        with pytest.raises(RecognizerUnavailableError):
            await service.analyze([IMAGE])

        mock_species_repository.get_or_create.assert_not_awaited()
        mock_probe.recognizer_failed.assert_called_once_with(error="HTTP 500")


class TestAnalyzeUploaded:
    """Tests for RecognitionService.analyze_uploaded."""

    @pytest.mark.asyncio
    async def test_loads_images_in_order(
        self, service, mock_recognizer, mock_image_source
    ):
        images = {
            "key-a": RecognitionImage(content=b"a", filename="key-a.jpg"),
            "key-b": RecognitionImage(content=b"b", filename="key-b.png"),
        }
        mock_image_source.load.side_effect = lambda key: images[key]
        mock_recognizer.identify.return_value = []

        await service.analyze_uploaded(["key-a", "key-b"])

        mock_recognizer.identify.assert_awaited_once_with(
            [images["key-a"], images["key-b"]], None
        )

    @pytest.mark.asyncio
    async def test_unknown_key_fails_before_recognition(
        self, service, mock_recognizer, mock_image_source, mock_probe
    ):
        mock_image_source.load.side_effect = lambda key: (
            None if key == "missing" else IMAGE
        )

        with pytest.raises(UnknownImageError) as exc_info:
            await service.analyze_uploaded(["present", "missing"])

        assert exc_info.value.key == "missing"
        mock_recognizer.identify.assert_not_awaited()
        mock_probe.unknown_image.assert_called_once_with(key="missing")

    @pytest.mark.asyncio
    async def test_requires_image_source(self, mock_recognizer, mock_species_repository):
        service = RecognitionService(
            recognizer=mock_recognizer, species_repository=mock_species_repository
        )

        with pytest.raises(RuntimeError):
            await service.analyze_uploaded(["key"])
