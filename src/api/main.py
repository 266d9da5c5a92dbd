"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from botany.presentation import routes as botany_routes
from iam.dependencies.authentication import get_jwks_provider
from iam.presentation import routes as auth_routes
from infrastructure.database.dependencies import close_database_connections
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultStartupProbe, RequestContextMiddleware
from infrastructure.settings import get_settings
from infrastructure.version import __version__
from media.presentation import routes as media_routes
from shared_kernel.auth import JWKSUnavailableError


@asynccontextmanager
async def plantswap_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - Signing key preload (a failure is logged, keys load on first use)
    - Database engine disposal on shutdown
    """
    settings = get_settings()
    configure_logging(debug=settings.debug)
    probe = DefaultStartupProbe()
    probe.application_starting(app_name=settings.app_name, version=__version__)

    try:
        key_count = await get_jwks_provider().load()
        probe.signing_keys_preloaded(key_count=key_count)
    except JWKSUnavailableError as e:
        probe.signing_keys_preload_failed(error=str(e))

    yield

    await close_database_connections()
    probe.application_stopped()


app = FastAPI(
    title="Plantswap API",
    description="Marketplace for listing, discovering and trading plants",
    version=__version__,
    lifespan=plantswap_lifespan,
)

app.add_middleware(RequestContextMiddleware)

app.include_router(auth_routes.router)
app.include_router(media_routes.router)
app.include_router(botany_routes.router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}
