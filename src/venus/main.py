"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown (schema, hashing pool, DB
engine). Middleware, CORS, exception handlers and routers are all
registered here.

Importing this module loads Settings, so a production deployment with a
missing/weak VENUS_JWT_SECRET fails here, before serving anything.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from venus import __version__
from venus.api import api_router
from venus.auth.errors import CredentialError, OwnershipError, SigningError
from venus.config import settings

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info(
        "venus.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )
    if settings.insecure_dev_bypass:
        logger.warning(
            "venus.dev_bypass_enabled",
            user_id=settings.dev_bypass_user_id,
        )

    from venus.db.engine import engine, init_models

    if settings.auto_create_schema:
        await init_models()
        logger.info("venus.schema_ready")

    yield

    logger.info("venus.shutdown")

    from venus.auth.password import shutdown_executor

    shutdown_executor()
    await engine.dispose()


# ─── Exception handlers ──────────────────────────────────


async def _ownership_error(request: Request, exc: OwnershipError) -> JSONResponse:
    # Same body as a genuine 404 for this resource type
    return JSONResponse(status_code=404, content={"detail": f"{exc.resource} not found"})


async def _internal_auth_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("auth.internal_error", error_type=type(exc).__name__, error=str(exc))
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="Venus",
        description="Drawing backend — accounts, projects and images",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → Security → CORS → handler

    from venus.middleware.request_id import RequestIdMiddleware
    from venus.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)

    app.add_exception_handler(OwnershipError, _ownership_error)
    app.add_exception_handler(CredentialError, _internal_auth_error)
    app.add_exception_handler(SigningError, _internal_auth_error)

    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: venus.main:app)
app = create_app()
