"""FunctionEntry — one row of the app function catalog.

Every import source (JSON, spreadsheet, HTML table, manual entry) is
normalized into this schema. Persisted with the camelCase keys of the
catalog blob (``appName``, ``functionName``, ``landingPage``, ``exampleQueries``).
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class FunctionEntry(BaseModel):
    """A defined app function: what it is, how to reach it, how users ask for it."""

    id: str
    app_name: str
    function_name: str
    path: str = ""  # Human-readable activation steps
    landing_page: str = ""  # Deep link / URI
    example_queries: list[str] = Field(default_factory=list)

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "frozen": True,
    }

    def matches(self, term: str) -> bool:
        """Case-insensitive containment on app name, function name or any example query."""
        needle = term.lower()
        return (
            needle in self.app_name.lower()
            or needle in self.function_name.lower()
            or any(needle in q.lower() for q in self.example_queries)
        )
