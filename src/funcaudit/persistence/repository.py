"""StateRepository — the catalog and history blobs over any IBlobStore.

Both blobs are JSON arrays of the camelCase model dumps. History is stored
most-recent-first.
"""

from __future__ import annotations

import json
import logging

from pydantic import TypeAdapter, ValidationError

from funcaudit.core.exceptions import StoreError
from funcaudit.core.protocols import IBlobStore
from funcaudit.models.function_entry import FunctionEntry
from funcaudit.models.history import HistoryRecord

logger = logging.getLogger(__name__)

_CATALOG = TypeAdapter(list[FunctionEntry])
_HISTORY = TypeAdapter(list[HistoryRecord])


class StateRepository:
    """IStateRepository persisting full snapshots on every save."""

    def __init__(
        self,
        store: IBlobStore,
        catalog_key: str = "app_functions_db",
        history_key: str = "app_search_history",
    ) -> None:
        self._store = store
        self._catalog_key = catalog_key
        self._history_key = history_key

    def _read(self, key: str, adapter: TypeAdapter) -> list | None:
        raw = self._store.get(key)
        if raw is None:
            return None
        try:
            return adapter.validate_json(raw)
        except ValidationError as exc:
            raise StoreError(f"Persisted blob {key!r} is not valid: {exc.error_count()} error(s)") from exc

    def load(self) -> tuple[list[FunctionEntry] | None, list[HistoryRecord]]:
        """Return ``(catalog, history)``; catalog is None when it was never saved."""
        catalog = self._read(self._catalog_key, _CATALOG)
        history = self._read(self._history_key, _HISTORY) or []
        logger.info(
            "Loaded state: %s catalog entries, %d history records",
            "no" if catalog is None else len(catalog),
            len(history),
        )
        return catalog, history

    def save_catalog(self, entries: list[FunctionEntry]) -> None:
        self._store.set(self._catalog_key, self._dump(_CATALOG, entries))

    def save_history(self, records: list[HistoryRecord]) -> None:
        self._store.set(self._history_key, self._dump(_HISTORY, records))

    @staticmethod
    def _dump(adapter: TypeAdapter, items: list) -> str:
        return json.dumps(adapter.dump_python(items, mode="json", by_alias=True), ensure_ascii=False)
