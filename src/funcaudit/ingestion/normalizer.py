"""FunctionNormalizer — turns untyped import records into FunctionEntry rows.

Never raises on a malformed field: missing or unusable values degrade to
the placeholders of the alias table. Document-level failures belong to
the file parsers.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from typing import Any

from funcaudit.core.protocols import IIdGenerator
from funcaudit.ingestion.field_aliases import RULES_BY_FIELD, resolve
from funcaudit.models.function_entry import FunctionEntry

logger = logging.getLogger(__name__)

# Comma and semicolon in ASCII and full-width forms, plus newline.
QUERY_DELIMITERS = re.compile(r"[;；,，\n]")


def split_example_queries(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(q) for q in value]
    if isinstance(value, str):
        return [part.strip() for part in QUERY_DELIMITERS.split(value) if part.strip()]
    return [str(value)]


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value.strip()
    return str(value)


class FunctionNormalizer:
    """Resolves each record independently against the alias table."""

    def __init__(self, id_generator: IIdGenerator) -> None:
        self._ids = id_generator

    def normalize_record(self, record: Mapping[str, Any]) -> FunctionEntry:
        raw_id = resolve(record, RULES_BY_FIELD["id"])
        return FunctionEntry(
            id=_text(raw_id) if raw_id is not None else self._ids.new_id(),
            app_name=_text(resolve(record, RULES_BY_FIELD["app_name"])),
            function_name=_text(resolve(record, RULES_BY_FIELD["function_name"])),
            path=_text(resolve(record, RULES_BY_FIELD["path"])),
            landing_page=_text(resolve(record, RULES_BY_FIELD["landing_page"])),
            example_queries=split_example_queries(resolve(record, RULES_BY_FIELD["example_queries"])),
        )

    def normalize(self, records: Iterable[Any]) -> list[FunctionEntry]:
        entries: list[FunctionEntry] = []
        for position, record in enumerate(records):
            if not isinstance(record, Mapping):
                logger.warning("Skipping non-object record at position %d: %r", position, record)
                continue
            entries.append(self.normalize_record(record))
        return entries

    @staticmethod
    def normalize_free_text(text: str) -> list[str]:
        """One query per line; blank lines dropped."""
        return [line.strip() for line in text.splitlines() if line.strip()]
