"""PostgreSQL implementation of ISpeciesRepository.

Reconciliation races are settled by the primary key: every caller runs
INSERT ... ON CONFLICT DO NOTHING and then reads back whichever row won.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from botany.domain.value_objects import Habitat, SpeciesRecord
from botany.infrastructure.models import SpeciesModel
from botany.ports.repositories import ISpeciesRepository


class SpeciesRepository(ISpeciesRepository):
    """PostgreSQL-backed species catalog."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: AsyncSession from FastAPI dependency injection
        """
        self._session = session

    async def get_or_create(self, record: SpeciesRecord) -> SpeciesRecord:
        insert_stmt = (
            insert(SpeciesModel)
            .values(
                taxonomy_id=record.taxonomy_id,
                gbif_id=record.gbif_id,
                common_name=record.common_name,
                scientific_name=record.scientific_name,
                habitat=record.habitat.value if record.habitat else None,
                produces_fruit=record.produces_fruit,
                description=record.description,
            )
            .on_conflict_do_nothing(index_elements=[SpeciesModel.taxonomy_id])
        )
        select_stmt = select(SpeciesModel).where(
            SpeciesModel.taxonomy_id == record.taxonomy_id
        )

        async with self._session.begin():
            await self._session.execute(insert_stmt)
            result = await self._session.execute(select_stmt)
            model = result.scalar_one()
            return self._to_domain(model)

    def _to_domain(self, model: SpeciesModel) -> SpeciesRecord:
        return SpeciesRecord(
            taxonomy_id=model.taxonomy_id,
            scientific_name=model.scientific_name,
            common_name=model.common_name,
            gbif_id=model.gbif_id,
            habitat=Habitat(model.habitat) if model.habitat else None,
            produces_fruit=model.produces_fruit,
            description=model.description,
        )
