"""Session-backed identity cache.

Remembers the last bearer token seen for each identity so that a browser
session holding only an identity id can be turned back into a verified
Identity on later requests.
"""

from __future__ import annotations

from iam.application.observability import (
    DefaultIdentityCacheProbe,
    IdentityCacheProbe,
)
from iam.ports.repositories import ISessionCredentialRepository
from shared_kernel.auth import Identity, InvalidTokenError, TokenVerifier


class IdentityCache:
    """Upserts and re-verifies session credentials."""

    def __init__(
        self,
        credential_repository: ISessionCredentialRepository,
        token_verifier: TokenVerifier,
        probe: IdentityCacheProbe | None = None,
    ):
        """Initialize IdentityCache with dependencies.

        Args:
            credential_repository: Repository for session credentials
            token_verifier: Verifier used to re-check stored tokens
            probe: Optional domain probe for observability
        """
        self._credentials = credential_repository
        self._verifier = token_verifier
        self._probe = probe or DefaultIdentityCacheProbe()

    async def upsert(self, identity_id: str, access_token: str) -> None:
        """Store the identity's latest token, replacing any previous one."""
        await self._credentials.upsert(identity_id, access_token)
        self._probe.credential_stored(identity_id=identity_id)

    async def resolve(self, identity_id: str) -> Identity | None:
        """Turn an identity id back into a verified Identity.

        Returns None when nothing is stored for the id or when the stored
        token no longer verifies (expired, signing key rotated out). Callers
        treat that as "not logged in".

        Raises:
            JWKSUnavailableError: If signing keys cannot be loaded at all
        """
        token = await self._credentials.get_token(identity_id)
        if token is None:
            self._probe.identity_not_resolved(identity_id=identity_id, reason="unknown")
            return None

        try:
            identity = await self._verifier.verify(token)
        except InvalidTokenError as e:
            self._probe.identity_not_resolved(identity_id=identity_id, reason=e.reason)
            return None

        self._probe.identity_resolved(identity_id=identity.id)
        return identity
