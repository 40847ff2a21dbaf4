"""Report formatting: flattens classified queries into export rows and XLSX."""

from __future__ import annotations

import io
import zipfile
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from openpyxl import Workbook, load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from funcaudit.core.exceptions import ParseError
from funcaudit.models.classification import ClassificationResult
from funcaudit.models.report import (
    EMPTY_CELL,
    REPORT_SHEET_NAME,
    VERDICT_DEFINED,
    VERDICT_NEW,
    VERDICT_UNPROCESSED,
    ReportRow,
)


def _query_and_result(item: Any) -> tuple[str, ClassificationResult | None]:
    if isinstance(item, tuple):
        query, result = item
        return query, result
    return item.query, getattr(item, "result", None)


def format_row(query: str, result: ClassificationResult | None) -> ReportRow:
    if result is None:
        return ReportRow(query=query, verdict=VERDICT_UNPROCESSED)
    matched = result.matched_function
    return ReportRow(
        query=query,
        verdict=VERDICT_DEFINED if result.is_defined else VERDICT_NEW,
        confidence=f"{result.confidence_pct:.1f}%",
        app_name=matched.app_name if matched and matched.app_name else EMPTY_CELL,
        function_name=matched.function_name if matched and matched.function_name else EMPTY_CELL,
        reasoning=result.reasoning or EMPTY_CELL,
        suggestion=result.suggested_improvement or EMPTY_CELL,
    )


def format_report(items: Iterable[Any]) -> list[ReportRow]:
    """One row per item; accepts BatchItems, HistoryRecords or ``(query, result)`` pairs."""
    return [format_row(*_query_and_result(item)) for item in items]


def write_report_xlsx(rows: Iterable[ReportRow], destination: str | Path | None = None) -> bytes:
    """Single-sheet workbook with a header row. Also written to ``destination`` when given."""
    wb = Workbook()
    ws = wb.active
    ws.title = REPORT_SHEET_NAME
    ws.append(ReportRow.column_titles())
    for row in rows:
        ws.append(row.as_cells())

    buf = io.BytesIO()
    wb.save(buf)
    data = buf.getvalue()
    if destination is not None:
        Path(destination).write_bytes(data)
    return data


def read_report_xlsx(data: bytes) -> list[ReportRow]:
    """Parse an exported workbook back into rows."""
    try:
        wb = load_workbook(io.BytesIO(data), read_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, ValueError, OSError) as exc:
        raise ParseError(f"not a readable report workbook: {exc}", REPORT_SHEET_NAME) from exc
    try:
        if REPORT_SHEET_NAME not in wb.sheetnames:
            raise ParseError(f"sheet {REPORT_SHEET_NAME!r} missing", REPORT_SHEET_NAME)
        rows = list(wb[REPORT_SHEET_NAME].iter_rows(values_only=True))
    finally:
        wb.close()
    if not rows:
        return []
    titles = [str(t) for t in rows[0]]
    return [
        ReportRow.model_validate({t: "" if v is None else str(v) for t, v in zip(titles, values)})
        for values in rows[1:]
    ]
