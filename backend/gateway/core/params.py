"""Request Parameters: pure parsing of query options and request bodies.

Invariants:
    - Integers follow strict decimal syntax: optional sign then digits, nothing else
    - A present-but-malformed parameter always raises ClientInputError, never falls back
    - A JSON body decodes to exactly one value of any JSON type

Design Decisions:
    - Query parameters arrive as a plain Mapping so these functions stay free of FastAPI
"""

import json
import re
from collections.abc import Mapping
from typing import Any

from gateway.core.domain_types import (
    APPEND_INDEX, DEFAULT_POP_INDEX, NO_EXPIRY, ROOT_PATH, DocPath,
)
from gateway.core.errors import ClientInputError

_INTEGER = re.compile(r"[+-]?[0-9]+")

BAD_TTL = "Incompatible ttl received, must be an integer"
BAD_INDEX = "Incompatible index received, must be an integer"
BAD_BODY = "Unable to decode body"


def parse_int(raw: str, error: str) -> int:
    """Parse a decimal integer or raise ClientInputError labelled `error`."""
    if not _INTEGER.fullmatch(raw):
        raise ClientInputError(error, f"invalid integer literal: {raw!r}")
    return int(raw)


def resolve_path(params: Mapping[str, str]) -> DocPath:
    """Document path from the query, root when absent."""
    if "path" in params:
        return DocPath(params["path"])
    return ROOT_PATH


def resolve_ttl(params: Mapping[str, str]) -> int:
    """TTL seconds from the query. NO_EXPIRY when absent."""
    if "ttl" not in params:
        return NO_EXPIRY
    ttl = parse_int(params["ttl"], BAD_TTL)
    if ttl < 0:
        raise ClientInputError(BAD_TTL, f"ttl must not be negative, got {ttl}")
    return ttl


def resolve_pop_index(params: Mapping[str, str]) -> int:
    if "index" not in params:
        return DEFAULT_POP_INDEX
    return parse_int(params["index"], BAD_INDEX)


def resolve_insert_index(params: Mapping[str, str]) -> int:
    """Insert position. APPEND_INDEX when absent, meaning append to the tail."""
    if "index" not in params:
        return APPEND_INDEX
    return parse_int(params["index"], BAD_INDEX)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-finite number {name} is not valid JSON")


def decode_json_body(body: bytes) -> Any:
    """Decode a request body holding a single JSON value.

    Objects, arrays, strings, numbers, booleans and null are all accepted.
    NaN and Infinity literals are rejected.
    """
    try:
        return json.loads(body, parse_constant=_reject_constant)
    except (ValueError, UnicodeDecodeError) as e:
        raise ClientInputError(BAD_BODY, str(e) or "empty body")
