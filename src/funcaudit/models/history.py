"""HistoryRecord: append-only log entry of one classification."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from funcaudit.models.classification import ClassificationResult


class HistoryRecord(BaseModel):
    """A query, when it was classified, and the verdict."""

    id: str
    query: str
    timestamp: int  # Epoch milliseconds
    result: ClassificationResult

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "frozen": True,
    }

    @property
    def created_at(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp / 1000, tz=timezone.utc)
