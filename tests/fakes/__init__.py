"""Shared test doubles: memory backends, mock provider and scripted classifiers."""

from __future__ import annotations

from collections.abc import Sequence

from funcaudit.core.exceptions import ClassifierError
from funcaudit.core.ids import SequentialIdGenerator
from funcaudit.model_providers.mock_provider import FailingModelProvider, MockModelProvider
from funcaudit.models.classification import ClassificationResult
from funcaudit.models.function_entry import FunctionEntry
from funcaudit.persistence.memory_backend import MemoryBlobStore


class FakeClock:
    """Manually advanced epoch-millisecond clock."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, millis: int) -> None:
        self.now += millis


class ScriptedClassifier:
    """IQueryClassifier returning a fixed verdict, failing for chosen queries."""

    def __init__(self, fail_on: Sequence[str] = (), result: ClassificationResult | None = None) -> None:
        self._fail_on = set(fail_on)
        self._result = result or ClassificationResult(
            is_defined=False, match_score=0.1, reasoning="no match", suggested_improvement="add it",
        )
        self.seen: list[str] = []

    def classify(self, query: str, catalog: list[FunctionEntry]) -> ClassificationResult:
        self.seen.append(query)
        if query in self._fail_on:
            raise ClassifierError("timed out", query)
        return self._result


class NoSleep:
    """Records requested pauses instead of sleeping."""

    def __init__(self) -> None:
        self.pauses: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.pauses.append(seconds)


__all__ = [
    "FailingModelProvider",
    "FakeClock",
    "MemoryBlobStore",
    "MockModelProvider",
    "NoSleep",
    "ScriptedClassifier",
    "SequentialIdGenerator",
]
