"""ReJSON Gateway API: FastAPI application factory and entry point.

Invariants:
    - Routes registered explicitly: health, then documents, then raw keys
    - Interactive docs and the OpenAPI route are disabled, every single-segment
      path belongs to /{key}
    - The Redis pool, clients and translator are built once in the lifespan and
      stored on app.state
    - CORS configured from settings

Design Decisions:
    - create_app(settings) factory so tests build apps with their own settings;
      the module-level `app` uses get_settings()
    - TLS is enabled in run() when both certificate files exist
"""

import logging
import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gateway.api.response_normalizer import register_error_handlers
from gateway.api.routes import documents, health, keys
from gateway.config import Settings, get_settings
from gateway.infrastructure.observability import setup_logging
from gateway.infrastructure.redis_store import (
    DocumentClient, StoreClient, create_redis,
)
from gateway.services.command_translator import CommandTranslator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)
    client = create_redis(
        settings.redis_host,
        settings.redis_port,
        password=settings.redis_password,
        db=settings.redis_db,
    )
    store = StoreClient(client, settings.store_timeout_seconds)
    documents_client = DocumentClient(client, settings.store_timeout_seconds)
    app.state.store = store
    app.state.translator = CommandTranslator(store, documents_client)
    logger.info(
        f"Gateway started against {settings.redis_host}:{settings.redis_port} "
        f"(error status mode: {settings.error_status_mode.value})",
    )
    yield
    logger.info("Gateway shutting down")
    await client.aclose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application. The store connects in the lifespan."""
    settings = settings or get_settings()
    app = FastAPI(
        title="ReJSON Gateway",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=settings.cors_methods,
        allow_credentials=settings.cors_allow_credentials,
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(documents.router)
    app.include_router(keys.router)

    register_error_handlers(app)
    return app


app = create_app()


def tls_options(settings: Settings) -> dict[str, str]:
    """uvicorn ssl_* arguments, empty when the certificate pair is missing."""
    if os.path.isfile(settings.tls_certfile) and os.path.isfile(settings.tls_keyfile):
        return {
            "ssl_certfile": settings.tls_certfile,
            "ssl_keyfile": settings.tls_keyfile,
        }
    return {}


def run() -> None:
    """Console entry point: serve `app` with uvicorn."""
    settings = get_settings()
    tls = tls_options(settings)
    if not tls:
        logger.warning(
            f"TLS files {settings.tls_certfile}/{settings.tls_keyfile} not found, "
            "serving plain HTTP",
        )
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
        **tls,
    )


if __name__ == "__main__":
    run()
