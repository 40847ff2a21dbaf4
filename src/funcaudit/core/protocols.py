"""Protocol interfaces for all funcaudit abstractions.

All inter-layer communication uses these Protocols: structural typing,
no inheritance required, easy to test with isinstance().
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from funcaudit.models.classification import ClassificationResult
    from funcaudit.models.function_entry import FunctionEntry
    from funcaudit.models.history import HistoryRecord


# ---------------------------------------------------------------------------
# Model Provider
# ---------------------------------------------------------------------------

@runtime_checkable
class IModelProvider(Protocol):
    """Abstraction over the external LLM (mock, Gemini)."""

    def chat(self, messages: list[dict[str, str]], **kwargs: Any) -> str: ...


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

@runtime_checkable
class IQueryClassifier(Protocol):
    """Decides whether one query is covered by the catalog."""

    def classify(self, query: str, catalog: list[FunctionEntry]) -> ClassificationResult: ...


# ---------------------------------------------------------------------------
# Persistence: Blob Store
# ---------------------------------------------------------------------------

@runtime_checkable
class IBlobStore(Protocol):
    """Key-value store holding whole serialized snapshots."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


# ---------------------------------------------------------------------------
# Persistence: State Repository
# ---------------------------------------------------------------------------

@runtime_checkable
class IStateRepository(Protocol):
    """Loads and saves the catalog and history snapshots."""

    def load(self) -> tuple[list[FunctionEntry] | None, list[HistoryRecord]]: ...

    def save_catalog(self, entries: list[FunctionEntry]) -> None: ...

    def save_history(self, records: list[HistoryRecord]) -> None: ...


# ---------------------------------------------------------------------------
# Identifiers
# ---------------------------------------------------------------------------

@runtime_checkable
class IIdGenerator(Protocol):
    """Source of unique string ids for catalog entries and history records."""

    def new_id(self) -> str: ...
