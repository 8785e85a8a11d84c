"""Response Normalizer: one policy for turning results and errors into HTTP responses.

Invariants:
    - Successes are an explicit 200; the body and content type come from the result
    - A GET-style miss is an empty body: 200 in legacy mode, 404 in typed mode
    - Every failure renders {"Error", "ErrorMessage"} as application/json
    - Status codes come from resolve_status(kind, mode), nowhere else
    - Unhandled exceptions never leak internal details

Design Decisions:
    - Errors are raised by the translator and rendered by app-level exception
      handlers, so no route needs its own try/except
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, Response

from gateway.api.dependencies import get_status_mode
from gateway.core.domain_types import ErrorKind, ErrorStatusMode
from gateway.core.errors import GatewayError, resolve_status
from gateway.services.command_translator import TranslatedResult

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal server error"


def render_result(result: TranslatedResult, mode: ErrorStatusMode) -> Response:
    """Build the success (or not-found) response for a translated command."""
    if not result.found:
        return Response(status_code=resolve_status(ErrorKind.NOT_FOUND, mode))
    return Response(
        content=result.body,
        status_code=status.HTTP_200_OK,
        media_type=result.media_type,
    )


def render_error(exc: GatewayError, mode: ErrorStatusMode) -> JSONResponse:
    """Build the ErrorEnvelope response for a gateway error."""
    return JSONResponse(
        status_code=resolve_status(exc.kind, mode),
        content=exc.to_response(),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_gateway_error_handler(app)
    _register_generic_error_handler(app)


def _register_gateway_error_handler(app: FastAPI) -> None:

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        level = (
            logging.WARNING if exc.kind is ErrorKind.CLIENT_INPUT
            else logging.ERROR
        )
        logger.log(
            level,
            f"{exc.error}: {exc.error_message}",
            extra={
                "error_kind": exc.kind.value,
                "method": request.method,
                "key": exc.context.key or request.path_params.get("key"),
                "path": exc.context.path,
            },
        )
        return render_error(exc, get_status_mode(request))


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"error_kind": ErrorKind.INTERNAL.value},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "Error": INTERNAL_ERROR,
                "ErrorMessage": "An unexpected error occurred",
            },
        )
