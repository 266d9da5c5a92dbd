"""Browser login routes: authorization code flow with PKCE.

The pending login state lives in the server-side session, keyed by the
session cookie. After a successful callback the session id is rotated so a
pre-login session id can never be used to ride a logged-in session.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from fastapi.responses import RedirectResponse

from iam.application.services import LoginService
from iam.application.value_objects import LoginRejected
from iam.dependencies.identity import get_current_identity, get_session_id
from iam.dependencies.session import get_login_service, get_session_store
from iam.domain.value_objects import IDENTITY_ID_KEY, new_session_id
from iam.ports.exceptions import SessionExpiredOrMissingError, UpstreamExchangeError
from iam.ports.session_store import ISessionStore
from iam.presentation.models import IdentityResponse
from infrastructure.settings import get_settings
from shared_kernel.auth import Identity, JWKSUnavailableError

router = APIRouter(prefix="/auth", tags=["auth"])

DEFAULT_LANDING_PATH = "/"


def _set_session_cookie(response: Response, session_id: str) -> None:
    settings = get_settings()
    response.set_cookie(
        settings.session_cookie_name,
        session_id,
        max_age=settings.session_ttl_seconds,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


@router.get("/login")
async def login(
    request: Request,
    service: Annotated[LoginService, Depends(get_login_service)],
    session_store: Annotated[ISessionStore, Depends(get_session_store)],
    session_id: Annotated[str | None, Depends(get_session_id)],
    next_path: Annotated[
        str | None, Query(alias="next", description="Local path to return to")
    ] = None,
) -> Response:
    """Initiate the login flow.

    Redirects the browser to the identity provider. When the request comes
    from an HTMX in-page navigation, answers 200 with an ``HX-Redirect``
    header instead so the client performs the redirect itself.

    A session cookie is reused only while it names a live session; otherwise
    a fresh session id is issued.
    """
    if session_id is None or not await session_store.exists(session_id):
        session_id = new_session_id()
    authorization_url = await service.start(session_id, return_path=next_path)

    response: Response
    if request.headers.get("HX-Request") == "true":
        response = Response(
            status_code=status.HTTP_200_OK,
            headers={"HX-Redirect": authorization_url},
        )
    else:
        response = RedirectResponse(
            url=authorization_url,
            status_code=status.HTTP_307_TEMPORARY_REDIRECT,
        )
    _set_session_cookie(response, session_id)
    return response


@router.get("/callback")
async def callback(
    state: Annotated[str, Query()],
    code: Annotated[str, Query()],
    service: Annotated[LoginService, Depends(get_login_service)],
    session_store: Annotated[ISessionStore, Depends(get_session_store)],
    session_id: Annotated[str | None, Depends(get_session_id)],
) -> RedirectResponse:
    """Handle the identity provider's redirect back to the application.

    Returns:
        Redirect to the stored return path, or to ``/``

    Raises:
        HTTPException: 400 if no login is pending for this session,
            401 if the state or the token is rejected,
            502 if the identity provider failed
    """
    if session_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Login session missing or expired",
        )

    try:
        outcome = await service.complete(session_id, state=state, code=code)
    except SessionExpiredOrMissingError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Login session missing or expired",
        ) from e
    except (UpstreamExchangeError, JWKSUnavailableError) as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Identity provider error",
        ) from e

    if isinstance(outcome, LoginRejected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Login failed: {outcome.reason}",
        )

    rotated_id = new_session_id()
    await session_store.put(rotated_id, {IDENTITY_ID_KEY: outcome.identity.id})
    await session_store.delete(session_id)

    response = RedirectResponse(
        url=outcome.return_path or DEFAULT_LANDING_PATH,
        status_code=status.HTTP_303_SEE_OTHER,
    )
    _set_session_cookie(response, rotated_id)
    return response


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    session_store: Annotated[ISessionStore, Depends(get_session_store)],
    session_id: Annotated[str | None, Depends(get_session_id)],
) -> Response:
    """End the browser session."""
    if session_id is not None:
        await session_store.delete(session_id)
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(get_settings().session_cookie_name)
    return response


@router.get("/me")
async def me(
    identity: Annotated[Identity, Depends(get_current_identity)],
) -> IdentityResponse:
    """Return the authenticated caller's identity."""
    return IdentityResponse.from_domain(identity)
