"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        PLANTSWAP_DB_HOST: Database host (default: localhost)
        PLANTSWAP_DB_PORT: Database port (default: 5432)
        PLANTSWAP_DB_DATABASE: Database name (default: plantswap)
        PLANTSWAP_DB_USERNAME: Database user (default: plantswap)
        PLANTSWAP_DB_PASSWORD: Database password (required in production)
        PLANTSWAP_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 1)
        PLANTSWAP_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 5)
    """

    model_config = SettingsConfigDict(
        env_prefix="PLANTSWAP_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="plantswap", description="Database name")
    username: str = Field(default="plantswap", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=1,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=5,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class OIDCSettings(BaseSettings):
    """OpenID Connect settings for the identity provider (Keycloak realm).

    Environment variables:
        PLANTSWAP_OIDC_ISSUER_URL: Realm URL, e.g. https://sso.example.com/realms/plantswap
        PLANTSWAP_OIDC_CLIENT_ID: OAuth2 client id used for the login flow
        PLANTSWAP_OIDC_CLIENT_SECRET: Client secret (empty for public clients)
        PLANTSWAP_OIDC_AUDIENCE: Required token audience (default: plantswap)
        PLANTSWAP_OIDC_ADMIN_ROLE: Realm role granting the admin capability
        PLANTSWAP_OIDC_JWKS_REFRESH_COOLDOWN_SECONDS: Minimum delay between
            refresh-on-miss JWKS fetches
    """

    model_config = SettingsConfigDict(
        env_prefix="PLANTSWAP_OIDC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    issuer_url: str = Field(
        default="http://localhost:8080/realms/plantswap",
        description="OIDC issuer (Keycloak realm) URL",
    )
    client_id: str = Field(default="plantswap", description="OAuth2 client id")
    client_secret: SecretStr = Field(
        default=SecretStr(""),
        description="OAuth2 client secret (empty for public clients)",
    )
    audience: str = Field(default="plantswap", description="Required audience")
    verify_issuer: bool = Field(
        default=True,
        description="Reject tokens whose iss does not equal issuer_url",
    )
    scopes: str = Field(default="openid profile email", description="Login scopes")
    admin_role: str = Field(default="admin", description="Realm role for admins")
    allowed_algorithms: list[str] = Field(
        default=["RS256", "RS384", "RS512", "PS256", "ES256"],
        description="Signature algorithms accepted in token headers",
    )
    jwks_refresh_cooldown_seconds: float = Field(
        default=60.0,
        description="Minimum seconds between refresh-on-miss JWKS fetches",
        ge=0,
    )
    jwks_retry_backoff_seconds: float = Field(
        default=1.0,
        description="Minimum seconds between JWKS fetches while no keys are loaded",
        ge=0,
    )
    http_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout for calls to the identity provider",
        gt=0,
    )

    @property
    def normalized_issuer(self) -> str:
        """Issuer URL without trailing slash."""
        return self.issuer_url.rstrip("/")

    @property
    def authorization_endpoint(self) -> str:
        """Keycloak authorization endpoint."""
        return f"{self.normalized_issuer}/protocol/openid-connect/auth"

    @property
    def token_endpoint(self) -> str:
        """Keycloak token endpoint."""
        return f"{self.normalized_issuer}/protocol/openid-connect/token"

    @property
    def jwks_uri(self) -> str:
        """Keycloak certificate (JWKS) endpoint."""
        return f"{self.normalized_issuer}/protocol/openid-connect/certs"


class StorageSettings(BaseSettings):
    """S3-compatible object storage settings.

    Environment variables:
        PLANTSWAP_S3_ENDPOINT_URL: Endpoint (e.g. MinIO); empty for AWS
        PLANTSWAP_S3_ACCESS_KEY / PLANTSWAP_S3_SECRET_KEY: Credentials
        PLANTSWAP_S3_IMAGES_BUCKET: Bucket holding uploaded images
        PLANTSWAP_S3_MAX_UPLOAD_BYTES: Upload size cap (default: 10 MiB)
    """

    model_config = SettingsConfigDict(
        env_prefix="PLANTSWAP_S3_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    endpoint_url: str | None = Field(default=None, description="S3 endpoint URL")
    region: str = Field(default="us-east-1", description="S3 region")
    access_key: str = Field(default="", description="S3 access key id")
    secret_key: SecretStr = Field(default=SecretStr(""), description="S3 secret")
    images_bucket: str = Field(default="images", description="Images bucket")
    force_path_style: bool = Field(
        default=True,
        description="Use path-style addressing (required by MinIO)",
    )
    max_upload_bytes: int = Field(
        default=10 * 1024 * 1024,
        description="Maximum accepted image size in bytes",
        gt=0,
    )


class RecognitionSettings(BaseSettings):
    """Pl@ntNet recognition API settings.

    Environment variables:
        PLANTSWAP_PLANTNET_API_URL: Base URL (default: https://my-api.plantnet.org/v2/)
        PLANTSWAP_PLANTNET_API_KEY: API key
    """

    model_config = SettingsConfigDict(
        env_prefix="PLANTSWAP_PLANTNET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_url: str = Field(
        default="https://my-api.plantnet.org/v2/",
        description="Pl@ntNet API base URL",
    )
    api_key: SecretStr = Field(default=SecretStr(""), description="Pl@ntNet key")
    max_results: int = Field(default=10, description="Result cap", ge=1, le=10)
    language: str = Field(default="en", description="Common-name language")
    timeout_seconds: float = Field(default=30.0, description="Request timeout", gt=0)


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_prefix="PLANTSWAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="Plantswap API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")
    base_url: str = Field(
        default="http://localhost:8000",
        description="Public base URL, used to build the OIDC redirect URI",
    )

    # Browser sessions
    session_backend: Literal["database", "memory"] = Field(
        default="database",
        description="Where server-side session data is kept",
    )
    session_cookie_name: str = Field(default="plantswap_session")
    session_cookie_secure: bool = Field(default=True)
    session_ttl_seconds: int = Field(default=7 * 24 * 3600, gt=0)

    @property
    def callback_url(self) -> str:
        """Redirect URI registered with the identity provider."""
        return f"{self.base_url.rstrip('/')}/auth/callback"

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_oidc_settings() -> OIDCSettings:
    """Get cached OIDC settings."""
    return OIDCSettings()


@lru_cache
def get_storage_settings() -> StorageSettings:
    """Get cached object storage settings."""
    return StorageSettings()


@lru_cache
def get_recognition_settings() -> RecognitionSettings:
    """Get cached recognition API settings."""
    return RecognitionSettings()
