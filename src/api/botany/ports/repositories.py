"""Repository protocols (ports) for the Botany bounded context."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from botany.domain.value_objects import SpeciesRecord


@runtime_checkable
class ISpeciesRepository(Protocol):
    """Repository for the species catalog."""

    async def get_or_create(self, record: SpeciesRecord) -> SpeciesRecord:
        """Insert a record unless its taxonomy id exists, then load it.

        Concurrent callers racing on the same new taxonomy id all get the
        single stored record; the first insert wins and is never updated.

        Args:
            record: Record to insert if the species is not yet known

        Returns:
            The stored record, which may differ from the one passed in
        """
        ...
