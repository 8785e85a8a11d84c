"""Domain Types: names and constants shared by the translator, clients and routes.

Invariants:
    - Key and DocPath wrap str, never bytes
    - ROOT_PATH is the RedisJSON legacy root path
    - APPEND_INDEX is a sentinel, it is never sent to JSON.ARRINSERT
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

Key = NewType("Key", str)
DocPath = NewType("DocPath", str)


# ─── Defaults ────────────────────────────────────────────────────

ROOT_PATH = DocPath(".")
DEFAULT_POP_INDEX = 0
APPEND_INDEX = -1
NO_EXPIRY = 0

JSON_MEDIA_TYPE = "application/json"


# ─── Enums ───────────────────────────────────────────────────────

class ErrorKind(str, Enum):
    """Failure categories. All of them render the same envelope."""
    NOT_FOUND = "not_found"
    CLIENT_INPUT = "client_input"
    STORE_PROTOCOL = "store_protocol"
    SEMANTIC_CONFLICT = "semantic_conflict"
    TIMEOUT = "timeout"
    INTERNAL = "internal"


class ErrorStatusMode(str, Enum):
    """How ErrorKind maps to HTTP status codes."""
    LEGACY = "legacy"  # every error is a 500, not-found is a 200 with empty body
    TYPED = "typed"
