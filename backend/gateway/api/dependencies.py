"""FastAPI Dependencies: resolve the shared store objects and request inputs.

Invariants:
    - Translator and store client live on app.state, set once by the lifespan
    - Tests replace them through app.dependency_overrides
"""

from fastapi import Request
from starlette.requests import ClientDisconnect

from gateway.core.domain_types import ErrorStatusMode
from gateway.core.errors import ClientInputError
from gateway.infrastructure.redis_store import StoreClient
from gateway.services.command_translator import CommandTranslator


def get_translator(request: Request) -> CommandTranslator:
    translator = getattr(request.app.state, "translator", None)
    if translator is None:
        raise RuntimeError("Store not initialized")
    return translator


def get_store(request: Request) -> StoreClient | None:
    """Plain store client for probes. None before startup."""
    return getattr(request.app.state, "store", None)


def get_status_mode(request: Request) -> ErrorStatusMode:
    return request.app.state.settings.error_status_mode


async def request_body(request: Request) -> bytes:
    """Whole request body as bytes."""
    try:
        return await request.body()
    except ClientDisconnect as e:
        raise ClientInputError("Error parsing body", str(e) or "client disconnected")
