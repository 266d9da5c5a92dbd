"""Request authentication dependencies.

A request is authenticated either by an ``Authorization: Bearer`` header,
verified directly, or by the session cookie, whose identity id is resolved
through the identity cache. Anonymous requests get None from
``get_optional_identity`` and a 401 from ``get_current_identity``.
"""

from typing import Annotated, Callable

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from iam.application.services import IdentityCache
from iam.dependencies.authentication import get_token_verifier
from iam.dependencies.session import get_identity_cache, get_session_store
from iam.domain.value_objects import IDENTITY_ID_KEY, is_session_id
from iam.ports.session_store import ISessionStore
from infrastructure.settings import get_settings
from shared_kernel.auth import (
    Capability,
    Identity,
    InvalidTokenError,
    JWKSUnavailableError,
    TokenVerifier,
)

bearer_scheme = HTTPBearer(auto_error=False)


def get_session_id(request: Request) -> str | None:
    """Read the browser session id from its cookie.

    Cookies that could not have been issued by this service count as absent.
    """
    value = request.cookies.get(get_settings().session_cookie_name)
    if value is None or not is_session_id(value):
        return None
    return value


async def get_optional_identity(
    session_id: Annotated[str | None, Depends(get_session_id)],
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ],
    token_verifier: Annotated[TokenVerifier, Depends(get_token_verifier)],
    identity_cache: Annotated[IdentityCache, Depends(get_identity_cache)],
    session_store: Annotated[ISessionStore, Depends(get_session_store)],
) -> Identity | None:
    """Resolve the caller's identity, or None for anonymous requests.

    Raises:
        HTTPException: 503 if signing keys cannot be loaded
    """
    try:
        if credentials is not None:
            try:
                return await token_verifier.verify(credentials.credentials)
            except InvalidTokenError:
                return None

        if session_id is None:
            return None
        identity_id = await session_store.get(session_id, IDENTITY_ID_KEY)
        if identity_id is None:
            return None
        return await identity_cache.resolve(identity_id)
    except JWKSUnavailableError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication temporarily unavailable",
        ) from e


async def get_current_identity(
    identity: Annotated[Identity | None, Depends(get_optional_identity)],
) -> Identity:
    """Require an authenticated caller.

    Raises:
        HTTPException: 401 if the request is anonymous or its token is invalid
    """
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return identity


def require_capability(capability: Capability) -> Callable:
    """Build a dependency that requires the caller to hold a capability.

    Example:
        @router.delete("/images")
        async def purge(identity: Annotated[Identity, Depends(require_capability(Capability.ADMIN))]):
            ...
    """

    async def _require(
        identity: Annotated[Identity, Depends(get_current_identity)],
    ) -> Identity:
        if not identity.has(capability):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires {capability.value} capability",
            )
        return identity

    return _require
