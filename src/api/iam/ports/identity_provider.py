"""Port for the OpenID Connect identity provider."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class IIdentityProvider(Protocol):
    """The two halves of the authorization code flow the application drives."""

    def authorization_url(self, state: str, code_challenge: str) -> str:
        """Build the URL the browser is sent to for login.

        Args:
            state: Anti-CSRF token echoed back on the callback
            code_challenge: PKCE S256 challenge
        """
        ...

    async def exchange_code(self, code: str, code_verifier: str) -> str:
        """Exchange an authorization code for an access token.

        Args:
            code: Authorization code from the callback
            code_verifier: PKCE verifier matching the challenge sent at login

        Returns:
            The access token

        Raises:
            UpstreamExchangeError: On transport or protocol failure
        """
        ...
