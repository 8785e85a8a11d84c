"""Tests for the error taxonomy: envelope shape, relabelling, status mapping."""

import pytest

from gateway.core.domain_types import ErrorKind, ErrorStatusMode
from gateway.core.errors import (
    ClientInputError, ErrorContext, GatewayError, SemanticConflictError,
    StoreProtocolError, StoreTimeoutError, resolve_status,
)


def test_envelope_shape():
    err = ClientInputError("Unable to decode body", "Expecting value")
    assert err.to_response() == {
        "Error": "Unable to decode body",
        "ErrorMessage": "Expecting value",
    }


def test_kinds():
    assert ClientInputError("e", "m").kind is ErrorKind.CLIENT_INPUT
    assert StoreProtocolError("e", "m").kind is ErrorKind.STORE_PROTOCOL
    assert SemanticConflictError("e", "m").kind is ErrorKind.SEMANTIC_CONFLICT
    assert StoreTimeoutError("e", 2.5).kind is ErrorKind.TIMEOUT
    assert GatewayError("e", "m").kind is ErrorKind.INTERNAL


def test_timeout_message_names_command_and_deadline():
    err = StoreTimeoutError("Store command timed out", 2.5, "JSON.GET")
    assert err.error_message == "store did not answer JSON.GET within 2.5s"


def test_relabel_keeps_type_detail_and_extra_fields():
    original = StoreProtocolError("Store command failed", "boom", command="DEL")

    relabelled = original.relabel("Error deleting value from redis", ErrorContext(key="k"))

    assert type(relabelled) is StoreProtocolError
    assert relabelled.error == "Error deleting value from redis"
    assert relabelled.error_message == "boom"
    assert relabelled.command == "DEL"
    assert relabelled.context.key == "k"
    assert str(relabelled) == "Error deleting value from redis: boom"
    assert original.error == "Store command failed"


def test_relabel_without_context_keeps_original_context():
    ctx = ErrorContext(key="a", path=".p")
    relabelled = SemanticConflictError("x", "y", ctx).relabel("z")
    assert relabelled.context is ctx


@pytest.mark.parametrize("kind", list(ErrorKind))
def test_legacy_mode_collapses_errors_to_500(kind):
    expected = 200 if kind is ErrorKind.NOT_FOUND else 500
    assert resolve_status(kind, ErrorStatusMode.LEGACY) == expected


@pytest.mark.parametrize(
    ("kind", "status"),
    [
        (ErrorKind.NOT_FOUND, 404),
        (ErrorKind.CLIENT_INPUT, 400),
        (ErrorKind.SEMANTIC_CONFLICT, 409),
        (ErrorKind.STORE_PROTOCOL, 502),
        (ErrorKind.TIMEOUT, 504),
        (ErrorKind.INTERNAL, 500),
    ],
)
def test_typed_mode_mapping(kind, status):
    assert resolve_status(kind, ErrorStatusMode.TYPED) == status
