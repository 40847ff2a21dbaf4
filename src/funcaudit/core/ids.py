"""Identifier and clock sources injected into the normalizer, runner and workspace."""

from __future__ import annotations

import itertools
import time
import uuid


class RandomIdGenerator:
    """IIdGenerator producing short random tokens (9 chars, like the persisted ids)."""

    def __init__(self, length: int = 9) -> None:
        self._length = length

    def new_id(self) -> str:
        return uuid.uuid4().hex[: self._length]


class SequentialIdGenerator:
    """Deterministic IIdGenerator for tests: ``prefix-1``, ``prefix-2``, ..."""

    def __init__(self, prefix: str = "id", start: int = 1) -> None:
        self._prefix = prefix
        self._counter = itertools.count(start)

    def new_id(self) -> str:
        return f"{self._prefix}-{next(self._counter)}"


def now_millis() -> int:
    """Current instant as epoch milliseconds."""
    return time.time_ns() // 1_000_000
