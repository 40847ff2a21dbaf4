"""File parsers: decode import documents into untyped records or query strings.

Catalog imports accept JSON arrays, CSV, XLSX and HTML tables; batch query
lists accept plain text, JSON, CSV and XLSX. A document that cannot be
decoded as its declared format raises ParseError; a well-formed document
without data yields an empty list.
"""

from __future__ import annotations

import csv
import io
import json
import logging
import zipfile
from pathlib import PurePath
from typing import Any

from bs4 import BeautifulSoup
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from funcaudit.core.exceptions import ParseError
from funcaudit.ingestion.field_aliases import is_blank
from funcaudit.ingestion.normalizer import FunctionNormalizer

logger = logging.getLogger(__name__)

CATALOG_FORMATS = ("json", "xlsx", "xlsm", "csv", "html", "htm")
QUERY_FORMATS = ("txt", "json", "csv", "xlsx", "xlsm")


def file_format(filename: str) -> str:
    return PurePath(filename).suffix.lstrip(".").lower()


def decode_text(data: bytes, source: str = "") -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ParseError(f"not valid UTF-8 text ({exc.reason})", source) from exc


# ---------------------------------------------------------------------------
# Structured / tabular decoders
# ---------------------------------------------------------------------------

def parse_json_array(text: str, source: str = "") -> list[Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(f"invalid JSON at line {exc.lineno} column {exc.colno}: {exc.msg}", source) from exc
    if not isinstance(data, list):
        raise ParseError(f"expected a JSON array, got {type(data).__name__}", source)
    return data


def parse_json_records(text: str, source: str = "") -> list[Any]:
    """JSON array of objects. Non-object members are passed through for the normalizer to drop."""
    return parse_json_array(text, source)


def _read_csv_rows(data: bytes, source: str) -> list[list[Any]]:
    text = decode_text(data, source)
    try:
        return [row for row in csv.reader(io.StringIO(text))]
    except csv.Error as exc:
        raise ParseError(f"invalid CSV: {exc}", source) from exc


def _read_xlsx_rows(data: bytes, source: str) -> list[list[Any]]:
    try:
        wb = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, ValueError, OSError) as exc:
        raise ParseError(f"corrupt or unreadable workbook: {exc}", source) from exc
    try:
        ws = wb.worksheets[0] if wb.worksheets else None
        if ws is None:
            return []
        return [list(row) for row in ws.iter_rows(values_only=True)]
    finally:
        wb.close()


def read_table_rows(data: bytes, fmt: str, source: str = "") -> list[list[Any]]:
    """All rows of a CSV or first-sheet XLSX document, fully empty rows removed."""
    if fmt == "csv":
        rows = _read_csv_rows(data, source)
    elif fmt in ("xlsx", "xlsm"):
        rows = _read_xlsx_rows(data, source)
    else:
        raise ParseError(f"unsupported tabular format {fmt!r}", source)
    return [row for row in rows if not all(is_blank(cell) for cell in row)]


def rows_to_records(rows: list[list[Any]]) -> list[dict[str, Any]]:
    """First row is the header; every later row becomes a dict keyed by it."""
    if not rows:
        return []
    headers = ["" if h is None else str(h).strip() for h in rows[0]]
    records: list[dict[str, Any]] = []
    for row in rows[1:]:
        record: dict[str, Any] = {}
        for i, header in enumerate(headers):
            if not header or i >= len(row):
                continue
            record[header] = row[i]
        records.append(record)
    return records


def parse_tabular_records(data: bytes, fmt: str, source: str = "") -> list[dict[str, Any]]:
    return rows_to_records(read_table_rows(data, fmt, source))


def parse_html_table(html: str) -> list[dict[str, str]]:
    """Records from the first ``<table>`` of an HTML document.

    No table, or a table without at least one data row under its header,
    yields an empty list.
    """
    soup = BeautifulSoup(html, "html.parser")
    table = soup.find("table")
    if table is None:
        return []
    rows = table.find_all("tr")
    if len(rows) < 2:
        return []
    headers = [cell.get_text().strip() for cell in rows[0].find_all(["th", "td"])]
    records: list[dict[str, str]] = []
    for row in rows[1:]:
        cells = row.find_all("td")
        record: dict[str, str] = {}
        for i, header in enumerate(headers):
            if i < len(cells):
                record[header] = cells[i].get_text().strip()
        records.append(record)
    return records


# ---------------------------------------------------------------------------
# Document loaders
# ---------------------------------------------------------------------------

def load_catalog_document(data: bytes, filename: str) -> list[Any]:
    """Untyped catalog records from an uploaded file, dispatched on its extension."""
    fmt = file_format(filename)
    if fmt == "json":
        records = parse_json_records(decode_text(data, filename), filename)
    elif fmt in ("xlsx", "xlsm", "csv"):
        records = parse_tabular_records(data, fmt, filename)
    elif fmt in ("html", "htm"):
        records = parse_html_table(decode_text(data, filename))
    else:
        raise ParseError(
            f"unsupported catalog format {fmt!r} (expected one of {', '.join(CATALOG_FORMATS)})",
            filename,
        )
    logger.info("Parsed %d catalog records from %s", len(records), filename)
    return records


def _query_from_json_item(item: Any) -> str:
    if isinstance(item, str):
        return item.strip()
    if isinstance(item, dict):
        value = item.get("query")
        return str(value).strip() if not is_blank(value) else ""
    return ""


def load_query_document(data: bytes, filename: str) -> list[str]:
    """Query strings for a batch run.

    Text files hold one query per line, JSON files an array of strings or
    ``{"query": ...}`` objects, and tables carry the query in the first
    column under a header row.
    """
    fmt = file_format(filename)
    if fmt == "txt":
        queries = FunctionNormalizer.normalize_free_text(decode_text(data, filename))
    elif fmt == "json":
        items = parse_json_array(decode_text(data, filename), filename)
        queries = [_query_from_json_item(item) for item in items]
    elif fmt in ("csv", "xlsx", "xlsm"):
        rows = read_table_rows(data, fmt, filename)
        queries = [
            str(row[0]).strip() if row and not is_blank(row[0]) else ""
            for row in rows[1:]
        ]
    else:
        raise ParseError(
            f"unsupported query list format {fmt!r} (expected one of {', '.join(QUERY_FORMATS)})",
            filename,
        )
    queries = [q for q in queries if q]
    logger.info("Parsed %d queries from %s", len(queries), filename)
    return queries
