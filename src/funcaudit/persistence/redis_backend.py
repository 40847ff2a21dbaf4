"""Redis blob store: each state blob is one string key under a namespace."""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

import redis

from funcaudit.core.exceptions import StoreError

T = TypeVar("T")


class RedisBlobStore:
    """IBlobStore backed by Redis. Blobs never expire; every save overwrites the whole value."""

    def __init__(self, host: str = "localhost", port: int = 6379, db: int = 0, namespace: str = "funcaudit:") -> None:
        self._namespace = namespace
        self._client = redis.Redis(
            host=host, port=port, db=db, decode_responses=True,
        )

    def _redis_key(self, key: str) -> str:
        return f"{self._namespace}{key}"

    def _call(self, action: str, key: str, op: Callable[[str], T]) -> T:
        try:
            return op(self._redis_key(key))
        except redis.RedisError as exc:
            raise StoreError(f"Could not {action} blob {key!r} in Redis: {exc}") from exc

    def get(self, key: str) -> str | None:
        return self._call("read", key, self._client.get)

    def set(self, key: str, value: str) -> None:
        self._call("write", key, lambda k: self._client.set(k, value))

    def delete(self, key: str) -> None:
        self._call("delete", key, self._client.delete)
