from functools import lru_cache

from infrastructure.settings import get_oidc_settings
from shared_kernel.auth import (
    Capability,
    DefaultSigningKeysProbe,
    DefaultTokenVerifierProbe,
    JWKSProvider,
    TokenVerifier,
)


@lru_cache
def get_jwks_provider() -> JWKSProvider:
    """Get the process-wide signing key provider.

    Uses lru_cache so that the key set fetched at startup is shared by every
    request and by every verifier.

    Returns:
        JWKSProvider configured from OIDC settings.
    """
    settings = get_oidc_settings()
    return JWKSProvider(
        jwks_uri=settings.jwks_uri,
        probe=DefaultSigningKeysProbe(),
        refresh_cooldown_seconds=settings.jwks_refresh_cooldown_seconds,
        retry_backoff_seconds=settings.jwks_retry_backoff_seconds,
        timeout_seconds=settings.http_timeout_seconds,
    )


@lru_cache
def get_token_verifier() -> TokenVerifier:
    """Get cached token verifier.

    Returns:
        TokenVerifier configured from OIDC settings.
    """
    settings = get_oidc_settings()
    return TokenVerifier(
        keys=get_jwks_provider(),
        audience=settings.audience,
        probe=DefaultTokenVerifierProbe(),
        issuer=settings.normalized_issuer if settings.verify_issuer else None,
        allowed_algorithms=settings.allowed_algorithms,
        role_capabilities={settings.admin_role: Capability.ADMIN},
    )
