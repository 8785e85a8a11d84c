"""Command Translator: turns one HTTP request into one store command.

Invariants:
    - Each public method issues at most one store command
    - Malformed ttl/index/body raises ClientInputError before any store command is sent
    - Client errors leaving this module carry the operation's short message
      ("Failed to pop", "Error setting value to redis", ...)
    - A nil JSON.SET reply is a SemanticConflictError, never a success
    - Nothing is cached between calls, the translator only holds the two clients

Design Decisions:
    - Clients are injected at construction (one translator per process, built in the
      app lifespan) so routes and tests never reach for module globals
    - Results are plain TranslatedResult values; HTTP status is decided by the normalizer
"""

import logging
from collections.abc import Awaitable, Mapping
from dataclasses import dataclass
from typing import TypeVar

from gateway.core.domain_types import APPEND_INDEX, JSON_MEDIA_TYPE, DocPath, Key
from gateway.core.errors import ErrorContext, GatewayError, SemanticConflictError
from gateway.core.params import (
    decode_json_body, resolve_insert_index, resolve_path,
    resolve_pop_index, resolve_ttl,
)
from gateway.infrastructure.redis_store import DocumentClient, StoreClient

logger = logging.getLogger(__name__)

T = TypeVar("T")

UNEXPECTED = "Unexpected error occurred"
SET_FAILED = "Error setting value to redis"
DELETE_FAILED = "Error deleting value from redis"
JSON_SET_FAILED = "Failed to set"
JSON_SET_NOOP = "Unknown failure. Potentially trying to set property on non-json type"
POP_FAILED = "Failed to pop"
INSERT_FAILED = "Failed to insert record"


@dataclass(frozen=True)
class TranslatedResult:
    """Outcome of a successful translation.

    found=False marks a GET-style miss: the store had no value for the key/path.
    """
    body: bytes = b""
    media_type: str | None = None
    found: bool = True


NOT_FOUND = TranslatedResult(found=False)


class CommandTranslator:
    """One method per route handler."""

    def __init__(self, store: StoreClient, documents: DocumentClient):
        self.store = store
        self.documents = documents

    async def _call(
        self,
        error: str,
        call: Awaitable[T],
        key: Key,
        path: DocPath | None = None,
    ) -> T:
        """Await a client call, relabelling its failure with `error`."""
        try:
            return await call
        except GatewayError as e:
            raise e.relabel(error, ErrorContext(key=key, path=path)) from e

    # ─── Raw Key-Value ───────────────────────────────────────────

    async def raw_get(self, key: Key) -> TranslatedResult:
        logger.info(
            f"Request received for GET {key}",
            extra={"method": "GET", "key": key},
        )
        value = await self._call(UNEXPECTED, self.store.get(key), key)
        if value is None:
            logger.info("No value found in store", extra={"key": key})
            return NOT_FOUND
        logger.debug("Success", extra={"key": key})
        return TranslatedResult(body=value)

    async def raw_set(
        self, key: Key, params: Mapping[str, str], body: bytes,
    ) -> TranslatedResult:
        ttl = resolve_ttl(params)
        logger.info(
            f"Request received for SET {key} with ttl of {ttl}s",
            extra={"method": "SET", "key": key, "ttl": ttl},
        )
        await self._call(SET_FAILED, self.store.set(key, body, ttl), key)
        logger.debug("Success", extra={"key": key})
        return TranslatedResult()

    async def delete(self, key: Key) -> TranslatedResult:
        """DEL is unconditional, removing a missing key still succeeds."""
        logger.info(
            f"Request received for DELETE {key}",
            extra={"method": "DELETE", "key": key},
        )
        await self._call(DELETE_FAILED, self.store.delete(key), key)
        logger.debug("Success", extra={"key": key})
        return TranslatedResult()

    # ─── Documents ───────────────────────────────────────────────

    async def document_get(
        self, key: Key, params: Mapping[str, str],
    ) -> TranslatedResult:
        path = resolve_path(params)
        logger.info(
            f"Request received for JSON.GET {key} with path {path}",
            extra={"method": "JSON.GET", "key": key, "path": path},
        )
        value = await self._call(
            UNEXPECTED, self.documents.get(key, path), key, path,
        )
        if value is None:
            logger.info("No value found in store", extra={"key": key, "path": path})
            return NOT_FOUND
        return TranslatedResult(body=value, media_type=JSON_MEDIA_TYPE)

    async def document_set(
        self, key: Key, params: Mapping[str, str], body: bytes,
    ) -> TranslatedResult:
        """Write any JSON value at (key, path).

        The store answers nil instead of raising when the path cannot hold the
        value (e.g. a property under a scalar), which is reported as a conflict.
        """
        path = resolve_path(params)
        logger.info(
            f"Request received for JSON.SET {key} with path {path}",
            extra={"method": "JSON.SET", "key": key, "path": path},
        )
        value = decode_json_body(body)
        written = await self._call(
            JSON_SET_FAILED, self.documents.set(key, path, value), key, path,
        )
        if not written:
            raise SemanticConflictError(
                JSON_SET_FAILED, JSON_SET_NOOP, ErrorContext(key=key, path=path),
            )
        logger.debug("Success", extra={"key": key, "path": path})
        return TranslatedResult()

    # ─── Arrays ──────────────────────────────────────────────────

    async def array_pop(
        self, key: Key, params: Mapping[str, str],
    ) -> TranslatedResult:
        path = resolve_path(params)
        index = resolve_pop_index(params)
        logger.info(
            f"Request received for JSON.ARRPOP {key} with path {path} and index {index}",
            extra={"method": "JSON.ARRPOP", "key": key, "path": path, "index": index},
        )
        popped = await self._call(
            POP_FAILED, self.documents.arrpop(key, path, index), key, path,
        )
        if popped is None:
            logger.info("Array is empty", extra={"key": key, "path": path})
            return NOT_FOUND
        return TranslatedResult(body=popped, media_type=JSON_MEDIA_TYPE)

    async def array_insert(
        self, key: Key, params: Mapping[str, str], body: bytes,
    ) -> TranslatedResult:
        """Append when index is APPEND_INDEX, otherwise insert before `index`."""
        path = resolve_path(params)
        index = resolve_insert_index(params)
        logger.info(
            f"Request received for JSON.ARRINSERT {key} with path {path} and index {index}",
            extra={"method": "JSON.ARRINSERT", "key": key, "path": path, "index": index},
        )
        value = decode_json_body(body)
        if index == APPEND_INDEX:
            call = self.documents.arrappend(key, path, value)
        else:
            call = self.documents.arrinsert(key, path, index, value)
        await self._call(INSERT_FAILED, call, key, path)
        logger.debug("Success", extra={"key": key, "path": path})
        return TranslatedResult(media_type=JSON_MEDIA_TYPE)
