"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown: logging is configured and
the token signer is built once at startup, and the engine's connection
pool is disposed on shutdown.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from reviewstore import __version__
from reviewstore.api import api_router
from reviewstore.api.errors import register_error_handlers
from reviewstore.auth.jwt import get_token_signer
from reviewstore.config import settings
from reviewstore.logging_config import configure_logging
from reviewstore.middleware.request_id import RequestIdMiddleware

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    configure_logging(settings.log_level, json_logs=settings.log_json)
    get_token_signer()
    logger.info(
        "reviewstore.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    yield

    logger.info("reviewstore.shutdown")
    from reviewstore.db.engine import engine
    await engine.dispose()


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="Review Store",
        description="Items, reviews and comments with bearer-token auth",
        version=__version__,
        lifespan=lifespan,
    )

    # Request flow: RequestId → CORS → handler
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIdMiddleware)

    register_error_handlers(app)
    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: reviewstore.main:app)
app = create_app()
