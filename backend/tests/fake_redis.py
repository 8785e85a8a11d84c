"""In-memory Redis double: the command subset the gateway sends, RedisJSON included.

Invariants:
    - Same call surface as redis.asyncio.Redis for get/set/delete/ping/execute_command
    - Replies are bytes, ints or None, as with decode_responses=False
    - Rejections raise the real redis.exceptions.ResponseError
    - Time is a manual clock (advance()) so TTL expiry is deterministic
    - Every command is recorded in `commands`

Design Decisions:
    - Legacy RedisJSON paths only (".", ".a.b", ".list[0]"), enough for route tests
    - JSON.SET under a non-container, or under a missing parent, answers nil like RedisJSON
"""

import json
import re
from typing import Any

from redis.exceptions import ResponseError

WRONGTYPE = "WRONGTYPE Operation against a key holding the wrong kind of value"

_TOKEN = re.compile(r"\.([A-Za-z_$][\w$]*)|\[(-?\d+)\]")

_MISSING = object()


def _dumps(value: Any) -> bytes:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False).encode()


def parse_path(path: str) -> list[str | int]:
    """Split a legacy path into property names and array indexes."""
    if path in (".", "$", ""):
        return []
    rest = path[1:] if path.startswith("$") else path
    if not rest.startswith((".", "[")):
        rest = "." + rest
    tokens: list[str | int] = []
    pos = 0
    while pos < len(rest):
        m = _TOKEN.match(rest, pos)
        if not m:
            raise ResponseError(f"ERR syntax error at offset {pos} in path '{path}'")
        name, index = m.groups()
        tokens.append(name if name is not None else int(index))
        pos = m.end()
    return tokens


def _step(node: Any, token: str | int) -> Any:
    if isinstance(token, str) and isinstance(node, dict):
        return node.get(token, _MISSING)
    if isinstance(token, int) and isinstance(node, list):
        if -len(node) <= token < len(node):
            return node[token]
    return _MISSING


def resolve(doc: Any, tokens: list[str | int], path: str) -> Any:
    node = doc
    for token in tokens:
        node = _step(node, token)
        if node is _MISSING:
            raise ResponseError(f"ERR Path '{path}' does not exist")
    return node


class FakeRedis:
    """Subset of redis.asyncio.Redis backed by a dict."""

    def __init__(self):
        self.now = 0.0
        self.commands: list[tuple] = []
        self.closed = False
        # key -> (type, value, expires_at)
        self._data: dict[str, tuple[str, Any, float | None]] = {}

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def _entry(self, key: str):
        entry = self._data.get(key)
        if entry is not None and entry[2] is not None and entry[2] <= self.now:
            del self._data[key]
            return None
        return entry

    def _document(self, key: str):
        entry = self._entry(key)
        if entry is None:
            return None
        if entry[0] != "json":
            raise ResponseError(WRONGTYPE)
        return entry

    def ttl_of(self, key: str) -> float | None:
        entry = self._entry(key)
        return None if entry is None or entry[2] is None else entry[2] - self.now

    # ─── Plain commands ──────────────────────────────────────────

    async def get(self, key: str) -> bytes | None:
        self.commands.append(("GET", key))
        entry = self._entry(key)
        if entry is None:
            return None
        if entry[0] != "string":
            raise ResponseError(WRONGTYPE)
        return entry[1]

    async def set(self, key: str, value: bytes, ex: int | None = None) -> bool:
        self.commands.append(("SET", key, value, ex))
        expires_at = self.now + ex if ex else None
        self._data[key] = ("string", bytes(value), expires_at)
        return True

    async def delete(self, *keys: str) -> int:
        self.commands.append(("DEL", *keys))
        removed = 0
        for key in keys:
            if self._entry(key) is not None:
                del self._data[key]
                removed += 1
        return removed

    async def ping(self) -> bool:
        self.commands.append(("PING",))
        return True

    async def aclose(self) -> None:
        self.closed = True

    # ─── RedisJSON ───────────────────────────────────────────────

    async def execute_command(self, *args: Any) -> Any:
        self.commands.append(args)
        name, key, path, *rest = args
        handler = {
            "JSON.GET": self._json_get,
            "JSON.SET": self._json_set,
            "JSON.ARRAPPEND": self._json_arrappend,
            "JSON.ARRINSERT": self._json_arrinsert,
            "JSON.ARRPOP": self._json_arrpop,
        }.get(name)
        if handler is None:
            raise ResponseError(f"ERR unknown command '{name}'")
        return handler(key, path, *rest)

    def _json_get(self, key: str, path: str) -> bytes | None:
        entry = self._document(key)
        if entry is None:
            return None
        return _dumps(resolve(entry[1], parse_path(path), path))

    def _json_set(self, key: str, path: str, raw: str) -> bytes | None:
        value = json.loads(raw)
        tokens = parse_path(path)
        entry = self._document(key)
        if not tokens:
            self._data[key] = ("json", value, None)
            return b"OK"
        if entry is None:
            raise ResponseError("ERR new objects must be created at the root")
        try:
            parent = resolve(entry[1], tokens[:-1], path)
        except ResponseError:
            return None
        last = tokens[-1]
        if isinstance(parent, dict) and isinstance(last, str):
            parent[last] = value
            return b"OK"
        if isinstance(parent, list) and isinstance(last, int) and _step(parent, last) is not _MISSING:
            parent[last] = value
            return b"OK"
        return None

    def _array(self, key: str, path: str) -> list:
        entry = self._document(key)
        if entry is None:
            raise ResponseError("ERR could not perform this operation on a key that doesn't exist")
        node = resolve(entry[1], parse_path(path), path)
        if not isinstance(node, list):
            raise ResponseError(
                f"ERR wrong type of path value - expected array but found {type(node).__name__}",
            )
        return node

    def _json_arrappend(self, key: str, path: str, *values: str) -> int:
        array = self._array(key, path)
        array.extend(json.loads(v) for v in values)
        return len(array)

    def _json_arrinsert(self, key: str, path: str, index: int, *values: str) -> int:
        array = self._array(key, path)
        index = int(index)
        if index < 0:
            index += len(array)
        if not 0 <= index <= len(array):
            raise ResponseError("ERR index out of bounds")
        for offset, v in enumerate(values):
            array.insert(index + offset, json.loads(v))
        return len(array)

    def _json_arrpop(self, key: str, path: str, index: int = -1) -> bytes | None:
        array = self._array(key, path)
        if not array:
            return None
        index = int(index)
        if index < 0:
            index += len(array)
        index = min(max(index, 0), len(array) - 1)
        return _dumps(array.pop(index))
