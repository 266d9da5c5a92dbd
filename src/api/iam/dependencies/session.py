"""Dependency providers for browser sessions and the login flow."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.services import IdentityCache, LoginService
from iam.dependencies.authentication import get_token_verifier
from iam.infrastructure.keycloak_client import KeycloakClient
from iam.infrastructure.session_credential_repository import (
    SessionCredentialRepository,
)
from iam.infrastructure.session_store import InMemorySessionStore, SqlSessionStore
from iam.ports.identity_provider import IIdentityProvider
from iam.ports.session_store import ISessionStore
from infrastructure.database.dependencies import get_session
from infrastructure.settings import get_oidc_settings, get_settings
from shared_kernel.auth import TokenVerifier


@lru_cache
def _get_memory_session_store() -> InMemorySessionStore:
    return InMemorySessionStore(ttl_seconds=get_settings().session_ttl_seconds)


def get_session_store(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ISessionStore:
    """Get the configured session store.

    Args:
        session: Database session (unused by the in-memory backend)

    Returns:
        ISessionStore for the configured backend
    """
    settings = get_settings()
    if settings.session_backend == "memory":
        return _get_memory_session_store()
    return SqlSessionStore(session=session, ttl_seconds=settings.session_ttl_seconds)


@lru_cache
def get_identity_provider() -> IIdentityProvider:
    """Get the identity provider client configured from settings."""
    return KeycloakClient(
        settings=get_oidc_settings(),
        redirect_uri=get_settings().callback_url,
    )


def get_identity_cache(
    session: Annotated[AsyncSession, Depends(get_session)],
    token_verifier: Annotated[TokenVerifier, Depends(get_token_verifier)],
) -> IdentityCache:
    """Get IdentityCache instance.

    Args:
        session: Database session
        token_verifier: Shared token verifier

    Returns:
        IdentityCache backed by the session_credentials table
    """
    return IdentityCache(
        credential_repository=SessionCredentialRepository(session=session),
        token_verifier=token_verifier,
    )


def get_login_service(
    session_store: Annotated[ISessionStore, Depends(get_session_store)],
    identity_provider: Annotated[IIdentityProvider, Depends(get_identity_provider)],
    token_verifier: Annotated[TokenVerifier, Depends(get_token_verifier)],
    identity_cache: Annotated[IdentityCache, Depends(get_identity_cache)],
) -> LoginService:
    """Get LoginService instance.

    Returns:
        LoginService wired to the session store and identity provider
    """
    return LoginService(
        session_store=session_store,
        identity_provider=identity_provider,
        token_verifier=token_verifier,
        identity_cache=identity_cache,
    )
