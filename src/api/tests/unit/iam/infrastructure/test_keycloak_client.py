"""Unit tests for the Keycloak identity provider client.

Uses mocking for the token endpoint to avoid requiring real Keycloak.
"""

from __future__ import annotations

import urllib.parse
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from pydantic import SecretStr

from iam.infrastructure.keycloak_client import KeycloakClient
from iam.ports.exceptions import UpstreamExchangeError
from infrastructure.settings import OIDCSettings

TEST_ISSUER = "https://sso.example.com/realms/plantswap/"
REDIRECT_URI = "https://plantswap.example.com/auth/callback"


def _create_response_mock(status_code: int, json_data=None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    if json_data is None:
        response.json.side_effect = ValueError("No JSON")
    else:
        response.json.return_value = json_data
    return response


@pytest.fixture
def settings() -> OIDCSettings:
    return OIDCSettings(
        issuer_url=TEST_ISSUER,
        client_id="plantswap-web",
        client_secret=SecretStr("s3cret"),
    )


@pytest.fixture
def client(settings) -> KeycloakClient:
    return KeycloakClient(settings=settings, redirect_uri=REDIRECT_URI)


@pytest.fixture
def mock_http():
    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = AsyncMock()
        mock_client_class.return_value.__aenter__.return_value = mock_client
        yield mock_client


class TestAuthorizationUrl:
    """Tests for authorization URL construction."""

    def test_contains_code_flow_parameters(self, client):
        url = client.authorization_url(state="state-123", code_challenge="challenge")

        parsed = urllib.parse.urlparse(url)
        params = dict(urllib.parse.parse_qsl(parsed.query))
        assert (
            f"{parsed.scheme}://{parsed.netloc}{parsed.path}"
            == "https://sso.example.com/realms/plantswap/protocol/openid-connect/auth"
        )
        assert params == {
            "client_id": "plantswap-web",
            "response_type": "code",
            "scope": "openid profile email",
            "redirect_uri": REDIRECT_URI,
            "state": "state-123",
            "code_challenge": "challenge",
            "code_challenge_method": "S256",
        }


class TestExchangeCode:
    """Tests for the authorization code exchange."""

    @pytest.mark.asyncio
    async def test_returns_access_token(self, client, mock_http):
        mock_http.post.return_value = _create_response_mock(
            200, {"access_token": "token-abc", "token_type": "Bearer"}
        )

        token = await client.exchange_code("auth-code", "verifier")

        assert token == "token-abc"
        mock_http.post.assert_called_once()
        call = mock_http.post.call_args
        assert call.args[0] == (
            "https://sso.example.com/realms/plantswap/protocol/openid-connect/token"
        )
        assert call.kwargs["data"] == {
            "grant_type": "authorization_code",
            "client_id": "plantswap-web",
            "code": "auth-code",
            "redirect_uri": REDIRECT_URI,
            "code_verifier": "verifier",
            "client_secret": "s3cret",
        }

    @pytest.mark.asyncio
    async def test_public_client_sends_no_secret(self, mock_http):
        client = KeycloakClient(
            settings=OIDCSettings(issuer_url=TEST_ISSUER, client_secret=SecretStr("")),
            redirect_uri=REDIRECT_URI,
        )
        mock_http.post.return_value = _create_response_mock(200, {"access_token": "t"})

        await client.exchange_code("auth-code", "verifier")

        assert "client_secret" not in mock_http.post.call_args.kwargs["data"]

    @pytest.mark.asyncio
    async def test_error_response_raises(self, client, mock_http):
        mock_http.post.return_value = _create_response_mock(
            400, {"error": "invalid_grant", "error_description": "Code not valid"}
        )

        with pytest.raises(UpstreamExchangeError, match="Code not valid"):
            await client.exchange_code("used-code", "verifier")

    @pytest.mark.asyncio
    async def test_non_json_error_response_raises(self, client, mock_http):
        mock_http.post.return_value = _create_response_mock(502)

        with pytest.raises(UpstreamExchangeError, match="Unknown error"):
            await client.exchange_code("auth-code", "verifier")

    @pytest.mark.asyncio
    async def test_missing_access_token_raises(self, client, mock_http):
        mock_http.post.return_value = _create_response_mock(200, {"id_token": "x"})

        with pytest.raises(UpstreamExchangeError):
            await client.exchange_code("auth-code", "verifier")

    @pytest.mark.asyncio
    async def test_transport_error_raises(self, client, mock_http):
        mock_http.post.side_effect = httpx.ConnectError("connection refused")

        with pytest.raises(UpstreamExchangeError):
            await client.exchange_code("auth-code", "verifier")
