"""Batch run item, progress and summary models."""

from __future__ import annotations

from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, Field

from funcaudit.core.exceptions import InvalidTransitionError
from funcaudit.models.classification import ClassificationResult
from funcaudit.models.history import HistoryRecord


class BatchItemStatus(StrEnum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


_ALLOWED_TRANSITIONS: dict[BatchItemStatus, frozenset[BatchItemStatus]] = {
    BatchItemStatus.PENDING: frozenset({BatchItemStatus.PROCESSING}),
    BatchItemStatus.PROCESSING: frozenset({BatchItemStatus.COMPLETED, BatchItemStatus.ERROR}),
    BatchItemStatus.COMPLETED: frozenset(),
    BatchItemStatus.ERROR: frozenset(),
}


class BatchItem(BaseModel):
    """One query of a batch run. Runner-local, never persisted."""

    query: str
    status: BatchItemStatus = BatchItemStatus.PENDING
    result: Optional[ClassificationResult] = None
    error: str = ""

    @property
    def is_terminal(self) -> bool:
        return self.status in (BatchItemStatus.COMPLETED, BatchItemStatus.ERROR)

    def _move(self, target: BatchItemStatus) -> None:
        if target not in _ALLOWED_TRANSITIONS[self.status]:
            raise InvalidTransitionError(self.status.value, target.value)
        self.status = target

    def start(self) -> None:
        self._move(BatchItemStatus.PROCESSING)

    def complete(self, result: ClassificationResult) -> None:
        self._move(BatchItemStatus.COMPLETED)
        self.result = result

    def fail(self, message: str) -> None:
        self._move(BatchItemStatus.ERROR)
        self.error = message


class BatchProgress(BaseModel):
    """Snapshot pushed to progress observers after every attempted item."""

    index: int  # zero-based index of the item just attempted
    total: int
    percent: int
    item: BatchItem


class BatchRunSummary(BaseModel):
    """Outcome of one batch run."""

    records: list[HistoryRecord] = Field(default_factory=list)
    items: list[BatchItem] = Field(default_factory=list)
    progress: int = 0
    cancelled: bool = False

    @property
    def completed_count(self) -> int:
        return sum(1 for i in self.items if i.status == BatchItemStatus.COMPLETED)

    @property
    def error_count(self) -> int:
        return sum(1 for i in self.items if i.status == BatchItemStatus.ERROR)
