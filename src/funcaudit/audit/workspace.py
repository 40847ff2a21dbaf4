"""AuditWorkspace — the process-wide catalog and history.

Loaded once from the state repository; every mutation re-serializes the
full snapshot back through it before returning. A mutation that fails
validation leaves both the in-memory state and the store untouched.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from typing import Any

from funcaudit.audit.batch_runner import BatchRunner, ProgressCallback
from funcaudit.audit.default_catalog import DEFAULT_CATALOG
from funcaudit.core.exceptions import DuplicateFunctionError, FunctionNotFoundError
from funcaudit.core.ids import RandomIdGenerator, now_millis
from funcaudit.core.protocols import IIdGenerator, IQueryClassifier, IStateRepository
from funcaudit.core.types import Clock
from funcaudit.ingestion.file_parser import load_catalog_document, load_query_document
from funcaudit.ingestion.normalizer import FunctionNormalizer
from funcaudit.ingestion.web_import import fetch_html_table
from funcaudit.models.batch import BatchRunSummary
from funcaudit.models.catalog import CatalogStats
from funcaudit.models.classification import ClassificationResult
from funcaudit.models.function_entry import FunctionEntry
from funcaudit.models.history import HistoryRecord

logger = logging.getLogger(__name__)

HOUR_MILLIS = 60 * 60 * 1000


class AuditWorkspace:
    """Single writer for the catalog and history blobs."""

    def __init__(
        self,
        repository: IStateRepository,
        classifier: IQueryClassifier,
        *,
        id_generator: IIdGenerator | None = None,
        clock: Clock = now_millis,
        batch_runner: BatchRunner | None = None,
        seed_catalog: Iterable[FunctionEntry] = DEFAULT_CATALOG,
    ) -> None:
        self._repository = repository
        self._classifier = classifier
        self._ids = id_generator or RandomIdGenerator()
        self._clock = clock
        self._normalizer = FunctionNormalizer(self._ids)
        self._batch_runner = batch_runner or BatchRunner(classifier, id_generator=self._ids, clock=clock)
        self._seed = tuple(seed_catalog)
        self._lock = threading.RLock()
        self._functions: list[FunctionEntry] = []
        self._history: list[HistoryRecord] = []

    # ---- lifecycle ----

    def load(self) -> None:
        catalog, history = self._repository.load()
        with self._lock:
            if catalog is None:
                logger.info("No stored catalog, seeding %d default functions", len(self._seed))
                self._functions = list(self._seed)
                self._repository.save_catalog(self._functions)
            else:
                self._functions = catalog
            self._history = history

    @property
    def normalizer(self) -> FunctionNormalizer:
        return self._normalizer

    @property
    def batch_runner(self) -> BatchRunner:
        return self._batch_runner

    # ---- catalog ----

    @property
    def functions(self) -> tuple[FunctionEntry, ...]:
        with self._lock:
            return tuple(self._functions)

    def get_function(self, function_id: str) -> FunctionEntry:
        with self._lock:
            for entry in self._functions:
                if entry.id == function_id:
                    return entry
        raise FunctionNotFoundError(function_id)

    def search(self, term: str = "") -> list[FunctionEntry]:
        with self._lock:
            if not term:
                return list(self._functions)
            return [e for e in self._functions if e.matches(term)]

    def stats(self) -> CatalogStats:
        return CatalogStats.from_entries(self.functions)

    def add_functions(self, entries: Iterable[FunctionEntry]) -> list[FunctionEntry]:
        """Append entries in order; any id collision rejects the whole batch."""
        new_entries = list(entries)
        with self._lock:
            seen = {e.id for e in self._functions}
            duplicates: list[str] = []
            for entry in new_entries:
                if entry.id in seen:
                    duplicates.append(entry.id)
                seen.add(entry.id)
            if duplicates:
                raise DuplicateFunctionError(duplicates)
            updated = self._functions + new_entries
            self._repository.save_catalog(updated)
            self._functions = updated
        logger.info("Added %d functions to catalog", len(new_entries))
        return new_entries

    def delete_function(self, function_id: str) -> FunctionEntry:
        with self._lock:
            removed = self.get_function(function_id)
            updated = [e for e in self._functions if e.id != function_id]
            self._repository.save_catalog(updated)
            self._functions = updated
        logger.info("Deleted function %s", function_id)
        return removed

    def replace_function(self, entry: FunctionEntry) -> FunctionEntry:
        """Edit by delete-then-add; the edited entry moves to the end of the catalog."""
        with self._lock:
            self.get_function(entry.id)
            updated = [e for e in self._functions if e.id != entry.id] + [entry]
            self._repository.save_catalog(updated)
            self._functions = updated
        return entry

    def import_records(self, records: Iterable[Any]) -> list[FunctionEntry]:
        return self.add_functions(self._normalizer.normalize(records))

    def import_document(self, data: bytes, filename: str) -> list[FunctionEntry]:
        return self.import_records(load_catalog_document(data, filename))

    def import_url(self, url: str, **kwargs: Any) -> list[FunctionEntry]:
        return self.import_records(fetch_html_table(url, **kwargs))

    # ---- history ----

    @property
    def history(self) -> tuple[HistoryRecord, ...]:
        """Most recent first."""
        with self._lock:
            return tuple(self._history)

    def recent_history(self, hours: float = 24) -> list[HistoryRecord]:
        cutoff = self._clock() - int(hours * HOUR_MILLIS)
        return [r for r in self.history if r.timestamp > cutoff]

    def add_records(self, records: Iterable[HistoryRecord]) -> None:
        """Prepend records, keeping their given order ahead of older history."""
        new_records = list(records)
        if not new_records:
            return
        with self._lock:
            updated = new_records + self._history
            self._repository.save_history(updated)
            self._history = updated

    def clear_history(self) -> None:
        with self._lock:
            self._repository.save_history([])
            self._history = []
        logger.info("History cleared")

    # ---- classification ----

    def classify(self, query: str) -> tuple[HistoryRecord, ClassificationResult]:
        """Interactive classification. Nothing is recorded when the classifier fails."""
        result = self._classifier.classify(query, list(self.functions))
        record = HistoryRecord(id=self._ids.new_id(), query=query, timestamp=self._clock(), result=result)
        self.add_records([record])
        return record, result

    def run_batch(
        self,
        queries: Iterable[str],
        *,
        on_progress: ProgressCallback | None = None,
    ) -> BatchRunSummary:
        summary = self._batch_runner.run(list(self.functions), list(queries), on_progress=on_progress)
        self.add_records(summary.records)
        return summary

    def run_batch_document(self, data: bytes, filename: str, **kwargs: Any) -> BatchRunSummary:
        return self.run_batch(load_query_document(data, filename), **kwargs)
