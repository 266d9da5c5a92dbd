"""Signing key retrieval from the identity provider's JWKS endpoint.

Keys are fetched once at startup. Until a fetch succeeds, lookups retry after
a short backoff. Once keys are held, a token signed with a key id that is not
in the current set triggers at most one refresh per cooldown window, which
picks up key rotation without letting forged key ids flood the identity provider.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, Any, Callable

import httpx

if TYPE_CHECKING:
    from shared_kernel.auth.observability import SigningKeysProbe


class JWKSUnavailableError(Exception):
    """Raised when no signing keys could ever be loaded.

    This is an upstream failure, not a problem with the presented token.
    """

    pass


class JWKSProvider:
    """Holds the current signing keys, indexed by key id."""

    def __init__(
        self,
        jwks_uri: str,
        probe: SigningKeysProbe,
        refresh_cooldown_seconds: float = 60.0,
        retry_backoff_seconds: float = 1.0,
        timeout_seconds: float = 10.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the provider.

        Args:
            jwks_uri: URL of the identity provider's certs endpoint.
            probe: Observability probe for key set events.
            refresh_cooldown_seconds: Minimum delay between two fetches once
                a key set is held.
            retry_backoff_seconds: Minimum delay between two fetches while no
                key set has been loaded yet.
            timeout_seconds: HTTP timeout for a fetch.
            clock: Monotonic time source.
        """
        self._jwks_uri = jwks_uri
        self._probe = probe
        self._cooldown = refresh_cooldown_seconds
        self._retry_backoff = retry_backoff_seconds
        self._timeout = timeout_seconds
        self._clock = clock

        self._keys: dict[str, dict[str, Any]] = {}
        self._loaded = False
        self._last_attempt: float | None = None
        self._lock = asyncio.Lock()

    @property
    def loaded(self) -> bool:
        """Whether a key set has been fetched successfully at least once."""
        return self._loaded

    async def load(self) -> int:
        """Fetch the key set unconditionally.

        Returns:
            Number of signing keys now held.

        Raises:
            JWKSUnavailableError: If the fetch failed and no keys were held.
        """
        async with self._lock:
            await self._refresh()
        return len(self._keys)

    async def get_key(self, key_id: str) -> dict[str, Any] | None:
        """Look up a signing key, refreshing once on a miss.

        Args:
            key_id: The ``kid`` from a token header.

        Returns:
            The JWK as a dictionary, or None if the key id is unknown.

        Raises:
            JWKSUnavailableError: If no key set could ever be loaded.
        """
        key = self._keys.get(key_id)
        if key is not None:
            return key

        async with self._lock:
            # Double-check after acquiring lock
            key = self._keys.get(key_id)
            if key is not None:
                return key

            if not self._refresh_allowed():
                if not self._loaded:
                    raise JWKSUnavailableError(
                        "Signing keys unavailable, identity provider unreachable"
                    )
                self._probe.refresh_suppressed(key_id=key_id)
                return None

            await self._refresh()
            return self._keys.get(key_id)

    def _refresh_allowed(self) -> bool:
        if self._last_attempt is None:
            return True
        window = self._cooldown if self._loaded else self._retry_backoff
        return (self._clock() - self._last_attempt) >= window

    async def _refresh(self) -> None:
        """Replace the key set. Caller must hold the lock."""
        self._last_attempt = self._clock()
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(self._jwks_uri)
                response.raise_for_status()
                document = response.json()
        except (httpx.HTTPError, ValueError) as e:
            self._probe.keys_fetch_failed(error=str(e), keys_loaded=self._loaded)
            if not self._loaded:
                raise JWKSUnavailableError(
                    f"Failed to fetch signing keys: {e}"
                ) from e
            return

        self._keys = _index_signing_keys(document)
        self._loaded = True
        self._probe.keys_fetched(key_count=len(self._keys))


def _index_signing_keys(document: Any) -> dict[str, dict[str, Any]]:
    """Index the signature keys of a JWKS document by key id.

    Keys without a ``kid`` and encryption keys (``use: enc``) are skipped.
    """
    keys: dict[str, dict[str, Any]] = {}
    if not isinstance(document, dict):
        return keys
    for entry in document.get("keys", []):
        if not isinstance(entry, dict):
            continue
        kid = entry.get("kid")
        if not kid or entry.get("use", "sig") != "sig":
            continue
        keys[kid] = entry
    return keys
