"""Classification result and the wire contract of the external classifier."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator
from pydantic.alias_generators import to_camel

from funcaudit.models.function_entry import FunctionEntry


class ClassificationResult(BaseModel):
    """Verdict for one query against the catalog."""

    is_defined: bool
    match_score: float = Field(ge=0.0, le=1.0)
    matched_function: Optional[FunctionEntry] = None
    reasoning: str
    suggested_improvement: Optional[str] = None

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "frozen": True,
    }

    @model_validator(mode="after")
    def _match_requires_defined(self) -> ClassificationResult:
        if self.matched_function is not None and not self.is_defined:
            raise ValueError("matched_function must be absent when is_defined is false")
        return self

    @property
    def confidence_pct(self) -> float:
        return self.match_score * 100


# ---------------------------------------------------------------------------
# Classifier wire contract
# ---------------------------------------------------------------------------

class CondensedFunction(BaseModel):
    """Field-reduced catalog entry embedded in classifier requests."""

    id: str
    app: str
    func: str
    queries: list[str] = Field(default_factory=list)

    @classmethod
    def from_entry(cls, entry: FunctionEntry) -> CondensedFunction:
        return cls(
            id=entry.id,
            app=entry.app_name,
            func=entry.function_name,
            queries=list(entry.example_queries),
        )


class ClassifierResponse(BaseModel):
    """Structured object the classifier must return.

    ``isDefined``, ``matchScore`` and ``reasoning`` are required; a payload
    missing any of them is rejected.
    """

    isDefined: bool
    matchScore: float
    matchedFunctionId: Optional[str] = None
    reasoning: str
    suggestedImprovement: Optional[str] = None

    model_config = {"extra": "ignore"}


# JSON schema in the dialect of the Gemini ``responseSchema`` field.
CLASSIFIER_RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "isDefined": {"type": "BOOLEAN"},
        "matchScore": {"type": "NUMBER", "description": "0 to 1 for confidence level"},
        "matchedFunctionId": {
            "type": "STRING",
            "description": "The ID of the matched function if isDefined is true",
        },
        "reasoning": {"type": "STRING"},
        "suggestedImprovement": {"type": "STRING"},
    },
    "required": ["isDefined", "matchScore", "reasoning"],
}


class ClassifierRequest(BaseModel):
    """Everything sent to the classifier for one query."""

    query: str
    catalog: list[CondensedFunction] = Field(default_factory=list)
    system_instruction: str
    response_schema: dict[str, Any] = Field(default_factory=lambda: dict(CLASSIFIER_RESPONSE_SCHEMA))
