"""Type aliases used across funcaudit."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

JsonDict = dict[str, Any]
RawRecord = Mapping[str, Any]
FunctionId = str
EpochMillis = int
Clock = Callable[[], EpochMillis]
