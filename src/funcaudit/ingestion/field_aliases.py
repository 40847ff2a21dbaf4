"""Ordered alias table mapping raw record keys onto FunctionEntry fields.

Each rule lists the keys tried for one canonical field, first non-empty
value wins. Localized spreadsheet headers sit next to the camelCase keys of
the catalog blob so both exports and hand-made sheets import cleanly.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

UNKNOWN_APP = "Unknown App"
UNKNOWN_FUNCTION = "Unknown Function"


@dataclass(frozen=True)
class FieldRule:
    """Resolution rule for one canonical field."""

    field: str
    aliases: tuple[str, ...]
    default: Any = ""


FIELD_ALIASES: tuple[FieldRule, ...] = (
    FieldRule("id", ("id",), default=None),
    FieldRule("app_name", ("appName", "App名称", "App Name", "App"), default=UNKNOWN_APP),
    FieldRule(
        "function_name",
        ("functionName", "功能点名称", "功能点", "Function Name"),
        default=UNKNOWN_FUNCTION,
    ),
    FieldRule("path", ("path", "功能直达路径", "路径", "Path")),
    FieldRule("landing_page", ("landingPage", "最终落地页", "落地页", "Landing Page")),
    FieldRule(
        "example_queries",
        ("exampleQueries", "实例query", "Query", "Example Queries"),
        default=None,
    ),
)

RULES_BY_FIELD: dict[str, FieldRule] = {rule.field: rule for rule in FIELD_ALIASES}


def is_blank(value: Any) -> bool:
    """True for values that do not count as present: None, blank strings, empty lists."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def resolve(record: Mapping[str, Any], rule: FieldRule) -> Any:
    """Return the first non-blank value among the rule's aliases, else its default."""
    for key in rule.aliases:
        value = record.get(key)
        if not is_blank(value):
            return value
    return rule.default
