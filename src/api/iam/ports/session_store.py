"""Port for server-side browser session storage.

A session is an opaque id (carried in a cookie) mapped to a small set of
string key/value pairs with an expiry.
"""

from __future__ import annotations

from typing import Mapping, Protocol, Sequence, runtime_checkable


@runtime_checkable
class ISessionStore(Protocol):
    """Server-side session storage with a read-once ``take``."""

    async def put(self, session_id: str, values: Mapping[str, str]) -> None:
        """Merge values into the session, creating it if needed.

        Also pushes the session's expiry forward.
        """
        ...

    async def get(self, session_id: str, key: str) -> str | None:
        """Read one value, or None if the session or key is absent/expired."""
        ...

    async def exists(self, session_id: str) -> bool:
        """Whether a live (unexpired) session has this id."""
        ...

    async def take(self, session_id: str, keys: Sequence[str]) -> dict[str, str]:
        """Read and remove the given keys in one atomic step.

        Two concurrent takes on the same session never both see a value.

        Returns:
            The keys that were present, with their values
        """
        ...

    async def delete(self, session_id: str) -> None:
        """Remove the whole session. Deleting an unknown id is a no-op."""
        ...
