"""Catalog summary statistics."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from pydantic import BaseModel, Field

from funcaudit.models.function_entry import FunctionEntry

TOP_APPS_LIMIT = 8


class AppCount(BaseModel):
    app_name: str
    count: int


class CatalogStats(BaseModel):
    """Totals and the per-app distribution of the catalog."""

    function_count: int = 0
    app_count: int = 0
    top_apps: list[AppCount] = Field(default_factory=list)

    @classmethod
    def from_entries(cls, entries: Iterable[FunctionEntry], limit: int = TOP_APPS_LIMIT) -> CatalogStats:
        entries = list(entries)
        counts = Counter(e.app_name for e in entries)
        # Counter preserves first-seen order; sorted() is stable, so ties keep it.
        ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)[:limit]
        return cls(
            function_count=len(entries),
            app_count=len(counts),
            top_apps=[AppCount(app_name=name, count=n) for name, n in ranked],
        )
