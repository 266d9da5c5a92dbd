"""PostgreSQL implementation of ISessionCredentialRepository.

One row per identity id, written with INSERT ... ON CONFLICT DO UPDATE so
concurrent logins of the same identity never produce a duplicate.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from iam.infrastructure.models import SessionCredentialModel
from iam.ports.repositories import ISessionCredentialRepository
from infrastructure.database.models import utc_now


class SessionCredentialRepository(ISessionCredentialRepository):
    """PostgreSQL-backed repository for session credentials."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: AsyncSession from FastAPI dependency injection
        """
        self._session = session

    async def upsert(self, identity_id: str, access_token: str) -> None:
        """Insert the credential, or overwrite the token if one exists."""
        stmt = insert(SessionCredentialModel).values(
            identity_id=identity_id,
            access_token=access_token,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[SessionCredentialModel.identity_id],
            set_={
                "access_token": stmt.excluded.access_token,
                "updated_at": utc_now(),
            },
        )
        async with self._session.begin():
            await self._session.execute(stmt)

    async def get_token(self, identity_id: str) -> str | None:
        """Load the stored token for an identity, if any."""
        async with self._session.begin():
            stmt = select(SessionCredentialModel.access_token).where(
                SessionCredentialModel.identity_id == identity_id
            )
            result = await self._session.execute(stmt)
            return result.scalar_one_or_none()
