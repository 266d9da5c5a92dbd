"""Value objects for the IAM domain.

Value objects are immutable descriptors for the pieces of state a login
attempt and a browser session carry.
"""

from __future__ import annotations

import base64
import hashlib
import re
import secrets
from dataclasses import dataclass

# Keys under which a pending login is stashed in the browser session
CSRF_STATE_KEY = "oauth.csrf-state"
PKCE_VERIFIER_KEY = "oauth.pkce-verifier"
RETURN_PATH_KEY = "oauth.next-url"
PENDING_AUTHORIZATION_KEYS = (CSRF_STATE_KEY, PKCE_VERIFIER_KEY, RETURN_PATH_KEY)

# Key under which a logged-in session records who it belongs to
IDENTITY_ID_KEY = "auth.identity-id"

# 32 random bytes, base64url without padding
_SESSION_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]{43}")


def new_session_id() -> str:
    """Generate an opaque, unguessable browser session id."""
    return secrets.token_urlsafe(32)


def is_session_id(value: str) -> bool:
    """Whether a value has the shape of an id from ``new_session_id``."""
    return _SESSION_ID_PATTERN.fullmatch(value) is not None


@dataclass(frozen=True)
class PKCEPair:
    """PKCE code verifier and its S256 challenge (RFC 7636)."""

    verifier: str
    challenge: str

    @classmethod
    def generate(cls) -> PKCEPair:
        """Generate a fresh verifier/challenge pair.

        The verifier is 43 URL-safe characters; the challenge is the
        base64url-encoded SHA-256 of the verifier without padding.
        """
        verifier = secrets.token_urlsafe(32)
        digest = hashlib.sha256(verifier.encode("ascii")).digest()
        challenge = base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")
        return cls(verifier=verifier, challenge=challenge)


@dataclass(frozen=True)
class PendingAuthorization:
    """What a login attempt leaves behind in the session until the callback.

    Attributes:
        csrf_token: Random value sent to the identity provider as ``state``
        pkce_verifier: Secret half of the PKCE pair
        return_path: Local path to send the browser to after login
    """

    csrf_token: str
    pkce_verifier: str
    return_path: str | None = None

    @classmethod
    def begin(cls, return_path: str | None = None) -> tuple[PendingAuthorization, str]:
        """Start a login attempt.

        Returns:
            The pending state and the PKCE challenge to send to the provider.
        """
        pkce = PKCEPair.generate()
        pending = cls(
            csrf_token=secrets.token_urlsafe(32),
            pkce_verifier=pkce.verifier,
            return_path=sanitize_return_path(return_path),
        )
        return pending, pkce.challenge

    def to_session_values(self) -> dict[str, str]:
        """Serialize into session key/value pairs."""
        values = {
            CSRF_STATE_KEY: self.csrf_token,
            PKCE_VERIFIER_KEY: self.pkce_verifier,
        }
        if self.return_path:
            values[RETURN_PATH_KEY] = self.return_path
        return values


def sanitize_return_path(value: str | None) -> str | None:
    """Accept only local absolute paths as post-login targets.

    ``/listing/new`` is kept; ``//evil.example``, ``https://...`` and
    relative paths are dropped so the callback cannot be used as an open
    redirect.
    """
    if not value:
        return None
    if not value.startswith("/") or value.startswith("//"):
        return None
    if "\\" in value or any(ord(ch) < 0x20 for ch in value):
        return None
    return value
