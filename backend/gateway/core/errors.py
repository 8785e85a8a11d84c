"""Error Hierarchy: typed exceptions for every gateway failure mode.

Invariants:
    - Every error carries a short `error`, a detailed `error_message` and an ErrorKind
    - to_response() always produces the {"Error", "ErrorMessage"} envelope
    - HTTP status is resolved from the kind at render time, never stored on the error

Design Decisions:
    - Single hierarchy with GatewayError base: one FastAPI handler renders all of them
    - Status lookup keyed by (mode, kind) so the envelope shape never depends on the mode
"""

from dataclasses import dataclass

from gateway.core.domain_types import ErrorKind, ErrorStatusMode


@dataclass
class ErrorContext:
    """Request details attached to an error for logging."""
    key: str | None = None
    path: str | None = None


class GatewayError(Exception):
    """Base exception for all gateway errors."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self,
        error: str,
        error_message: str,
        context: ErrorContext | None = None,
    ):
        super().__init__(f"{error}: {error_message}")
        self.error = error
        self.error_message = error_message
        self.context = context or ErrorContext()

    def to_response(self) -> dict:
        """Convert to the ErrorEnvelope body."""
        return {"Error": self.error, "ErrorMessage": self.error_message}

    def relabel(
        self, error: str, context: ErrorContext | None = None,
    ) -> "GatewayError":
        """Copy of this error with a new short message, same kind and detail."""
        relabelled = self.__class__.__new__(self.__class__)
        relabelled.__dict__.update(self.__dict__)
        relabelled.error = error
        relabelled.args = (f"{error}: {self.error_message}",)
        if context is not None:
            relabelled.context = context
        return relabelled


# ─── Client Errors ───────────────────────────────────────────────

class ClientInputError(GatewayError):
    """Malformed query parameter or request body."""
    kind = ErrorKind.CLIENT_INPUT


# ─── Store Errors ────────────────────────────────────────────────

class StoreProtocolError(GatewayError):
    """Connection failure or command rejected by the store."""
    kind = ErrorKind.STORE_PROTOCOL

    def __init__(
        self,
        error: str,
        error_message: str,
        command: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(error, error_message, context)
        self.command = command


class SemanticConflictError(GatewayError):
    """Store accepted the command but changed nothing (nil reply)."""
    kind = ErrorKind.SEMANTIC_CONFLICT


class StoreTimeoutError(GatewayError):
    """Store call exceeded the configured deadline."""
    kind = ErrorKind.TIMEOUT

    def __init__(
        self,
        error: str,
        timeout_seconds: float,
        command: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            error,
            f"store did not answer {command or 'command'} within {timeout_seconds:g}s",
            context,
        )
        self.timeout_seconds = timeout_seconds
        self.command = command


# ─── Status Mapping ──────────────────────────────────────────────

_TYPED_STATUS: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CLIENT_INPUT: 400,
    ErrorKind.SEMANTIC_CONFLICT: 409,
    ErrorKind.STORE_PROTOCOL: 502,
    ErrorKind.TIMEOUT: 504,
    ErrorKind.INTERNAL: 500,
}


def resolve_status(kind: ErrorKind, mode: ErrorStatusMode) -> int:
    """HTTP status for a kind under the given mode.

    In legacy mode not-found is a success (200) and every real error is 500.
    """
    if mode is ErrorStatusMode.TYPED:
        return _TYPED_STATUS[kind]
    if kind is ErrorKind.NOT_FOUND:
        return 200
    return 500
