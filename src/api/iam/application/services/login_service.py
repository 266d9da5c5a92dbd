"""Login service orchestrating the authorization code flow with PKCE.

A login attempt moves from anonymous to awaiting-callback when ``start``
stashes its pending state in the browser session, and from there to
authenticated or rejected when ``complete`` consumes that state.
"""

from __future__ import annotations

import hmac

from iam.application.observability import DefaultLoginProbe, LoginProbe
from iam.application.services.identity_cache import IdentityCache
from iam.application.value_objects import (
    STATE_MISMATCH,
    LoginOutcome,
    LoginRejected,
    LoginSucceeded,
)
from iam.domain.value_objects import (
    CSRF_STATE_KEY,
    PENDING_AUTHORIZATION_KEYS,
    PKCE_VERIFIER_KEY,
    RETURN_PATH_KEY,
    PendingAuthorization,
)
from iam.ports.exceptions import SessionExpiredOrMissingError, UpstreamExchangeError
from iam.ports.identity_provider import IIdentityProvider
from iam.ports.session_store import ISessionStore
from shared_kernel.auth import InvalidTokenError, TokenVerifier


class LoginService:
    """Application service for the browser login flow."""

    def __init__(
        self,
        session_store: ISessionStore,
        identity_provider: IIdentityProvider,
        token_verifier: TokenVerifier,
        identity_cache: IdentityCache,
        probe: LoginProbe | None = None,
    ):
        """Initialize LoginService with dependencies.

        Args:
            session_store: Server-side session storage
            identity_provider: The OIDC provider client
            token_verifier: Verifier for the exchanged access token
            identity_cache: Cache that persists the session credential
            probe: Optional domain probe for observability
        """
        self._sessions = session_store
        self._provider = identity_provider
        self._verifier = token_verifier
        self._identity_cache = identity_cache
        self._probe = probe or DefaultLoginProbe()

    async def start(self, session_id: str, return_path: str | None = None) -> str:
        """Begin a login attempt for the given browser session.

        Args:
            session_id: The browser's session id
            return_path: Where to send the browser after login. Only local
                absolute paths are kept.

        Returns:
            The identity provider's authorization URL
        """
        pending, code_challenge = PendingAuthorization.begin(return_path)
        url = self._provider.authorization_url(
            state=pending.csrf_token,
            code_challenge=code_challenge,
        )
        await self._sessions.put(session_id, pending.to_session_values())
        self._probe.login_started(has_return_path=pending.return_path is not None)
        return url

    async def complete(self, session_id: str, state: str, code: str) -> LoginOutcome:
        """Finish a login attempt from the provider's callback.

        The pending state is removed from the session before anything else
        happens, so a replayed callback always fails.

        Args:
            session_id: The browser's session id
            state: The ``state`` query parameter
            code: The ``code`` query parameter

        Returns:
            LoginSucceeded with the identity and return path, or LoginRejected

        Raises:
            SessionExpiredOrMissingError: If no pending login state exists
            UpstreamExchangeError: If the code exchange failed
            JWKSUnavailableError: If signing keys cannot be loaded at all
        """
        values = await self._sessions.take(session_id, PENDING_AUTHORIZATION_KEYS)
        csrf_token = values.get(CSRF_STATE_KEY)
        pkce_verifier = values.get(PKCE_VERIFIER_KEY)
        if not csrf_token or not pkce_verifier:
            self._probe.pending_state_missing()
            raise SessionExpiredOrMissingError("No pending login for this session")

        if not hmac.compare_digest(state.encode("utf-8"), csrf_token.encode("utf-8")):
            self._probe.login_rejected(reason=STATE_MISMATCH)
            return LoginRejected(reason=STATE_MISMATCH)

        try:
            access_token = await self._provider.exchange_code(code, pkce_verifier)
        except UpstreamExchangeError as e:
            self._probe.code_exchange_failed(error=str(e))
            raise

        try:
            identity = await self._verifier.verify(access_token)
        except InvalidTokenError as e:
            self._probe.login_rejected(reason=e.reason)
            return LoginRejected(reason=e.reason)

        await self._identity_cache.upsert(identity.id, access_token)
        self._probe.login_succeeded(identity_id=identity.id)
        return LoginSucceeded(identity=identity, return_path=values.get(RETURN_PATH_KEY))
