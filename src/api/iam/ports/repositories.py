"""Repository protocols (ports) for IAM bounded context.

Repository protocols define the interface for persisting and retrieving
session credentials without tying the application layer to PostgreSQL.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ISessionCredentialRepository(Protocol):
    """Repository for the last-known bearer token of each identity.

    Holds exactly one row per identity id at all times.
    """

    async def upsert(self, identity_id: str, access_token: str) -> None:
        """Insert the credential, or overwrite it if one exists.

        Args:
            identity_id: The identity's ``sub``
            access_token: The bearer token (secret, never logged)
        """
        ...

    async def get_token(self, identity_id: str) -> str | None:
        """Load the stored token for an identity.

        Args:
            identity_id: The identity's ``sub``

        Returns:
            The stored token, or None if none was ever stored
        """
        ...
