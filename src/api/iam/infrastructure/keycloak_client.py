"""Keycloak implementation of IIdentityProvider.

Builds the authorization URL for the code flow with PKCE and exchanges
authorization codes at the realm's token endpoint.
"""

from __future__ import annotations

import urllib.parse

import httpx

from iam.ports.exceptions import UpstreamExchangeError
from iam.ports.identity_provider import IIdentityProvider
from infrastructure.settings import OIDCSettings


class KeycloakClient(IIdentityProvider):
    """Talks to one Keycloak realm on behalf of this application."""

    def __init__(self, settings: OIDCSettings, redirect_uri: str) -> None:
        """Initialize the client.

        Args:
            settings: OIDC settings (realm URL, client credentials, scopes)
            redirect_uri: The application's registered callback URL
        """
        self._settings = settings
        self._redirect_uri = redirect_uri

    def authorization_url(self, state: str, code_challenge: str) -> str:
        params = {
            "client_id": self._settings.client_id,
            "response_type": "code",
            "scope": self._settings.scopes,
            "redirect_uri": self._redirect_uri,
            "state": state,
            "code_challenge": code_challenge,
            "code_challenge_method": "S256",
        }
        return (
            f"{self._settings.authorization_endpoint}?"
            f"{urllib.parse.urlencode(params)}"
        )

    async def exchange_code(self, code: str, code_verifier: str) -> str:
        data = {
            "grant_type": "authorization_code",
            "client_id": self._settings.client_id,
            "code": code,
            "redirect_uri": self._redirect_uri,
            "code_verifier": code_verifier,
        }
        client_secret = self._settings.client_secret.get_secret_value()
        if client_secret:
            data["client_secret"] = client_secret

        try:
            async with httpx.AsyncClient(
                timeout=self._settings.http_timeout_seconds
            ) as client:
                response = await client.post(self._settings.token_endpoint, data=data)
        except httpx.HTTPError as e:
            raise UpstreamExchangeError(f"Token endpoint unreachable: {e}") from e

        if response.status_code != 200:
            raise UpstreamExchangeError(
                f"Token exchange failed ({response.status_code}): "
                f"{_error_description(response)}"
            )

        try:
            access_token = response.json()["access_token"]
        except (ValueError, KeyError, TypeError) as e:
            raise UpstreamExchangeError(
                "Token endpoint returned no access token"
            ) from e
        if not isinstance(access_token, str) or not access_token:
            raise UpstreamExchangeError("Token endpoint returned no access token")
        return access_token


def _error_description(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return "Unknown error"
    if not isinstance(body, dict):
        return "Unknown error"
    return str(body.get("error_description") or body.get("error") or "Unknown error")
