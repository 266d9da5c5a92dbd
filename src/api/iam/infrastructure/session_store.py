"""Session store implementations.

``SqlSessionStore`` keeps sessions in PostgreSQL and makes ``take`` atomic
with a row lock. ``InMemorySessionStore`` serves single-process deployments
and tests, guarding every operation with one asyncio lock.
"""

from __future__ import annotations

import asyncio
import time
from datetime import timedelta
from typing import Callable, Mapping, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from iam.infrastructure.models import WebSessionModel
from iam.ports.session_store import ISessionStore
from infrastructure.database.models import utc_now


class SqlSessionStore(ISessionStore):
    """PostgreSQL-backed session store."""

    def __init__(self, session: AsyncSession, ttl_seconds: int) -> None:
        """Initialize store with database session.

        Args:
            session: AsyncSession from FastAPI dependency injection
            ttl_seconds: Lifetime of a session after its last write
        """
        self._session = session
        self._ttl = timedelta(seconds=ttl_seconds)

    async def put(self, session_id: str, values: Mapping[str, str]) -> None:
        now = utc_now()
        async with self._session.begin():
            model = await self._session.get(
                WebSessionModel, session_id, with_for_update=True
            )
            if model is None:
                self._session.add(
                    WebSessionModel(
                        id=session_id,
                        data=dict(values),
                        expires_at=now + self._ttl,
                    )
                )
                return

            current = dict(model.data) if model.expires_at > now else {}
            current.update(values)
            # Reassign so the JSONB column is flagged dirty
            model.data = current
            model.expires_at = now + self._ttl

    async def get(self, session_id: str, key: str) -> str | None:
        async with self._session.begin():
            stmt = select(WebSessionModel).where(
                WebSessionModel.id == session_id,
                WebSessionModel.expires_at > utc_now(),
            )
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()
            if model is None:
                return None
            return model.data.get(key)

    async def exists(self, session_id: str) -> bool:
        async with self._session.begin():
            stmt = select(WebSessionModel.id).where(
                WebSessionModel.id == session_id,
                WebSessionModel.expires_at > utc_now(),
            )
            result = await self._session.execute(stmt)
            return result.scalar_one_or_none() is not None

    async def take(self, session_id: str, keys: Sequence[str]) -> dict[str, str]:
        async with self._session.begin():
            stmt = (
                select(WebSessionModel)
                .where(WebSessionModel.id == session_id)
                .with_for_update()
            )
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()
            if model is None:
                return {}
            if model.expires_at <= utc_now():
                await self._session.delete(model)
                return {}

            remaining = dict(model.data)
            taken = {key: remaining.pop(key) for key in keys if key in remaining}
            if taken:
                model.data = remaining
            return taken

    async def delete(self, session_id: str) -> None:
        async with self._session.begin():
            await self._session.execute(
                delete(WebSessionModel).where(WebSessionModel.id == session_id)
            )


class InMemorySessionStore(ISessionStore):
    """Process-local session store."""

    def __init__(
        self,
        ttl_seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._sessions: dict[str, tuple[dict[str, str], float]] = {}
        self._lock = asyncio.Lock()

    def _live_data(self, session_id: str) -> dict[str, str] | None:
        entry = self._sessions.get(session_id)
        if entry is None:
            return None
        data, expires_at = entry
        if expires_at <= self._clock():
            del self._sessions[session_id]
            return None
        return data

    async def put(self, session_id: str, values: Mapping[str, str]) -> None:
        async with self._lock:
            data = self._live_data(session_id) or {}
            data.update(values)
            self._sessions[session_id] = (data, self._clock() + self._ttl)

    async def get(self, session_id: str, key: str) -> str | None:
        async with self._lock:
            data = self._live_data(session_id)
            return None if data is None else data.get(key)

    async def exists(self, session_id: str) -> bool:
        async with self._lock:
            return self._live_data(session_id) is not None

    async def take(self, session_id: str, keys: Sequence[str]) -> dict[str, str]:
        async with self._lock:
            data = self._live_data(session_id)
            if data is None:
                return {}
            return {key: data.pop(key) for key in keys if key in data}

    async def delete(self, session_id: str) -> None:
        async with self._lock:
            self._sessions.pop(session_id, None)
