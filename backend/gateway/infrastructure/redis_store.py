"""Redis Clients: thin async adapters over redis-py for plain keys and RedisJSON documents.

Invariants:
    - One shared redis.asyncio.Redis (connection pool) per process, safe for concurrent use
    - Every RedisError is mapped to StoreProtocolError, deadline expiry to StoreTimeoutError
    - Failures are logged at DEBUG here, the app error handler logs them once at ERROR
    - Replies are returned as bytes exactly as the store sent them (decode_responses=False)
    - A nil reply is returned as None, deciding what it means is the caller's job
    - No retries

Design Decisions:
    - RedisJSON commands are sent through execute_command rather than Redis.json():
      the JSON helper installs decoding callbacks on the shared client, and JSON.GET
      and JSON.ARRPOP bodies must reach the HTTP response without re-serialization
    - Optional per-call deadline via asyncio.wait_for; None keeps unbounded waits
"""

import asyncio
import json
import logging
from collections.abc import Awaitable
from typing import Any, TypeVar

import redis.asyncio as redis
from redis.exceptions import RedisError

from gateway.core.domain_types import NO_EXPIRY, DocPath, Key
from gateway.core.errors import StoreProtocolError, StoreTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")

STORE_FAILURE = "Store command failed"
STORE_TIMEOUT = "Store command timed out"


def create_redis(
    host: str, port: int, password: str | None = None, db: int = 0,
) -> redis.Redis:
    """Create the shared connection pool. Connections open lazily."""
    return redis.Redis(
        host=host, port=port, password=password, db=db,
        decode_responses=False,
    )


def encode_json(value: Any) -> str:
    """Serialize a decoded request body for a JSON.* command argument."""
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


class _RedisAdapter:
    """Shared command runner: deadline + error mapping."""

    def __init__(
        self, client: redis.Redis, timeout_seconds: float | None = None,
    ):
        self.client = client
        self.timeout_seconds = timeout_seconds

    async def _run(self, command: str, call: Awaitable[T]) -> T:
        try:
            if self.timeout_seconds is None:
                return await call
            try:
                return await asyncio.wait_for(call, self.timeout_seconds)
            except asyncio.TimeoutError:
                logger.debug(
                    f"Store deadline exceeded for {command}",
                    extra={"command": command},
                )
                raise StoreTimeoutError(
                    STORE_TIMEOUT, self.timeout_seconds, command,
                )
        except (RedisError, TimeoutError) as e:
            # Socket-level timeouts without a deadline are transport failures
            logger.debug(
                f"Store rejected {command}: {e}", extra={"command": command},
            )
            raise StoreProtocolError(
                STORE_FAILURE, str(e) or type(e).__name__, command=command,
            ) from e


class StoreClient(_RedisAdapter):
    """Plain key/value commands: GET, SET [EX], DEL, PING."""

    async def get(self, key: Key) -> bytes | None:
        return await self._run("GET", self.client.get(key))

    async def set(self, key: Key, value: bytes, ttl: int = NO_EXPIRY) -> None:
        """SET with an expiry in seconds. NO_EXPIRY (0) writes a persistent key."""
        await self._run("SET", self.client.set(key, value, ex=ttl or None))

    async def delete(self, key: Key) -> int:
        """DEL. Returns how many keys were removed (0 for a missing key)."""
        return await self._run("DEL", self.client.delete(key))

    async def ping(self) -> bool:
        return bool(await self._run("PING", self.client.ping()))


class DocumentClient(_RedisAdapter):
    """RedisJSON commands addressed by (key, path)."""

    async def get(self, key: Key, path: DocPath) -> bytes | None:
        return await self._run(
            "JSON.GET", self.client.execute_command("JSON.GET", key, path),
        )

    async def set(self, key: Key, path: DocPath, value: Any) -> bool:
        """JSON.SET. False when the store answers nil (nothing was written)."""
        reply = await self._run(
            "JSON.SET",
            self.client.execute_command("JSON.SET", key, path, encode_json(value)),
        )
        return reply is not None

    async def arrappend(self, key: Key, path: DocPath, value: Any) -> Any:
        return await self._run(
            "JSON.ARRAPPEND",
            self.client.execute_command(
                "JSON.ARRAPPEND", key, path, encode_json(value),
            ),
        )

    async def arrinsert(
        self, key: Key, path: DocPath, index: int, value: Any,
    ) -> Any:
        return await self._run(
            "JSON.ARRINSERT",
            self.client.execute_command(
                "JSON.ARRINSERT", key, path, index, encode_json(value),
            ),
        )

    async def arrpop(self, key: Key, path: DocPath, index: int) -> bytes | None:
        """JSON.ARRPOP. None when the array is empty."""
        return await self._run(
            "JSON.ARRPOP",
            self.client.execute_command("JSON.ARRPOP", key, path, index),
        )
