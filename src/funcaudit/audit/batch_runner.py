"""BatchRunner — drives the classifier over an ordered list of queries.

Items move ``pending -> processing -> completed | error`` strictly in input
order with at most one classification in flight. A failing item is marked
``error`` and the run continues; a fixed pause between items keeps the
external classifier under its rate limit.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from collections.abc import Callable, Iterable, Sequence

from funcaudit.core.exceptions import BatchAlreadyRunningError, BatchError
from funcaudit.core.ids import RandomIdGenerator, now_millis
from funcaudit.core.protocols import IIdGenerator, IQueryClassifier
from funcaudit.core.types import Clock
from funcaudit.models.batch import BatchItem, BatchItemStatus, BatchProgress, BatchRunSummary
from funcaudit.models.function_entry import FunctionEntry
from funcaudit.models.history import HistoryRecord

logger = logging.getLogger(__name__)

DEFAULT_PAUSE_SECONDS = 0.5

ProgressCallback = Callable[[BatchProgress], None]


def progress_percent(attempted: int, total: int) -> int:
    """Attempted share of the batch as a whole percent, halves rounded up."""
    if total <= 0:
        return 0
    return math.floor(100 * attempted / total + 0.5)


class BatchRunner:
    """Single-flight sequential runner with polled and pushed progress."""

    def __init__(
        self,
        classifier: IQueryClassifier,
        *,
        id_generator: IIdGenerator | None = None,
        clock: Clock = now_millis,
        pause_seconds: float = DEFAULT_PAUSE_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._classifier = classifier
        self._ids = id_generator or RandomIdGenerator()
        self._clock = clock
        self._pause_seconds = pause_seconds
        self._sleep = sleep
        self._run_lock = threading.Lock()
        self._cancel = threading.Event()
        self._items: list[BatchItem] = []
        self._progress = 0

    # ---- observation ----

    @property
    def items(self) -> list[BatchItem]:
        return [item.model_copy() for item in self._items]

    @property
    def progress(self) -> int:
        return self._progress

    @property
    def is_running(self) -> bool:
        return self._run_lock.locked()

    # ---- control ----

    def load(self, queries: Iterable[str]) -> list[BatchItem]:
        """Replace the pending list. Not allowed while a run is active."""
        if self.is_running:
            raise BatchAlreadyRunningError("Cannot load queries while a batch run is active")
        self._items = [BatchItem(query=q) for q in queries]
        self._progress = 0
        return self.items

    def cancel(self) -> None:
        """Stop before the next item; the current item finishes normally."""
        self._cancel.set()

    def run(
        self,
        catalog: Sequence[FunctionEntry],
        queries: Iterable[str] | None = None,
        *,
        on_progress: ProgressCallback | None = None,
    ) -> BatchRunSummary:
        if not self._run_lock.acquire(blocking=False):
            raise BatchAlreadyRunningError("A batch run is already in progress")
        try:
            if queries is not None:
                self._items = [BatchItem(query=q) for q in queries]
            self._progress = 0
            self._cancel.clear()
            return self._run(list(catalog), on_progress)
        finally:
            self._run_lock.release()

    # ---- internals ----

    def _assert_single_flight(self) -> None:
        if any(item.status == BatchItemStatus.PROCESSING for item in self._items):
            raise BatchError("Another batch item is already processing")

    def _run(self, catalog: list[FunctionEntry], on_progress: ProgressCallback | None) -> BatchRunSummary:
        total = len(self._items)
        records: list[HistoryRecord] = []
        cancelled = False
        logger.info("Batch run started: %d queries against %d catalog entries", total, len(catalog))

        for index, item in enumerate(self._items):
            if self._cancel.is_set():
                cancelled = True
                logger.info("Batch run cancelled before item %d of %d", index + 1, total)
                break

            self._assert_single_flight()
            item.start()
            try:
                result = self._classifier.classify(item.query, catalog)
            except Exception as exc:
                item.fail(str(exc))
                logger.warning("Batch item %d/%d failed for %r: %s", index + 1, total, item.query, exc)
            else:
                item.complete(result)
                records.append(
                    HistoryRecord(
                        id=self._ids.new_id(),
                        query=item.query,
                        timestamp=self._clock(),
                        result=result,
                    )
                )

            self._progress = progress_percent(index + 1, total)
            if on_progress is not None:
                on_progress(BatchProgress(index=index, total=total, percent=self._progress, item=item.model_copy()))
            self._sleep(self._pause_seconds)

        summary = BatchRunSummary(
            records=records,
            items=self.items,
            progress=self._progress,
            cancelled=cancelled,
        )
        logger.info(
            "Batch run finished: %d completed, %d failed, %d%% attempted",
            summary.completed_count, summary.error_count, summary.progress,
        )
        return summary
