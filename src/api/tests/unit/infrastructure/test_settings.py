"""Unit tests for application settings."""

import pytest
from pydantic import ValidationError

from infrastructure.settings import (
    DatabaseSettings,
    OIDCSettings,
    RecognitionSettings,
    Settings,
    StorageSettings,
)


class TestDatabaseSettings:
    def test_pool_max_below_min_rejected(self):
        with pytest.raises(ValidationError):
            DatabaseSettings(pool_min_connections=5, pool_max_connections=2)

    def test_connection_string_has_no_password(self):
        settings = DatabaseSettings(
            host="db", username="plantswap", password="hunter2", database="plants"
        )

        assert settings.connection_string == "postgresql://plantswap@db:5432/plants"
        assert "hunter2" not in settings.connection_string

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("PLANTSWAP_DB_POOL_MAX_CONNECTIONS", "20")

        assert DatabaseSettings().pool_max_connections == 20


class TestOIDCSettings:
    def test_endpoints_derive_from_issuer(self):
        settings = OIDCSettings(issuer_url="https://sso.example.com/realms/plantswap/")

        assert settings.normalized_issuer == "https://sso.example.com/realms/plantswap"
        assert settings.authorization_endpoint == (
            "https://sso.example.com/realms/plantswap/protocol/openid-connect/auth"
        )
        assert settings.token_endpoint == (
            "https://sso.example.com/realms/plantswap/protocol/openid-connect/token"
        )
        assert settings.jwks_uri == (
            "https://sso.example.com/realms/plantswap/protocol/openid-connect/certs"
        )


class TestSettings:
    def test_callback_url(self):
        settings = Settings(base_url="https://plantswap.example.com/")

        assert settings.callback_url == "https://plantswap.example.com/auth/callback"

    def test_unknown_session_backend_rejected(self):
        with pytest.raises(ValidationError):
            Settings(session_backend="redis")

    def test_session_cookie_secure_by_default(self):
        assert Settings().session_cookie_secure is True


def test_upload_cap_must_be_positive():
    with pytest.raises(ValidationError):
        StorageSettings(max_upload_bytes=0)


def test_recognition_result_cap_bounded():
    with pytest.raises(ValidationError):
        RecognitionSettings(max_results=11)
