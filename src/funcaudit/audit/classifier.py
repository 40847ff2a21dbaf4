"""QueryClassifier: asks the external classifier whether a query is already covered.

The catalog is condensed (id, app, function, example queries) and capped
before it is embedded in the request; the matched id is resolved against
the full catalog afterwards.
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Sequence

from pydantic import ValidationError

from funcaudit.core.exceptions import ClassifierError, EmptyQueryError
from funcaudit.core.protocols import IModelProvider
from funcaudit.models.classification import (
    CLASSIFIER_RESPONSE_SCHEMA,
    ClassificationResult,
    ClassifierRequest,
    ClassifierResponse,
    CondensedFunction,
)
from funcaudit.models.function_entry import FunctionEntry

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_CAP = 100

SYSTEM_INSTRUCTION = """\
You are an assistant specializing in mobile app automation.
Your task is to determine if a new user query matches an existing defined app function.

Match Criteria:
- Semantic Similarity: Even if words are different, does the intent match an existing function?
- App Context: Is the app mentioned or implied the same as a defined function?
- Specificity: A match must be highly specific to the function's purpose; a loose paraphrase is not a match.

Judge equivalence of intent, not lexical overlap.
Definitions are provided in the JSON list."""

PROMPT_TEMPLATE = """\
User Query: "{query}"

Existing Functions Database (partial/relevant):
{catalog}

Analyze if the user query is already covered by any of these definitions."""


class QueryClassifier:
    """IQueryClassifier over an IModelProvider returning ClassifierResponse JSON."""

    def __init__(self, model: IModelProvider, *, catalog_cap: int = DEFAULT_CATALOG_CAP) -> None:
        self._model = model
        self._catalog_cap = catalog_cap

    def build_request(self, query: str, catalog: Sequence[FunctionEntry]) -> ClassifierRequest:
        condensed = [CondensedFunction.from_entry(e) for e in catalog[: self._catalog_cap]]
        return ClassifierRequest(
            query=query,
            catalog=condensed,
            system_instruction=SYSTEM_INSTRUCTION,
            response_schema=dict(CLASSIFIER_RESPONSE_SCHEMA),
        )

    @staticmethod
    def render_messages(request: ClassifierRequest) -> list[dict[str, str]]:
        catalog_json = json.dumps(
            [c.model_dump() for c in request.catalog], ensure_ascii=False
        )
        return [
            {"role": "system", "content": request.system_instruction},
            {"role": "user", "content": PROMPT_TEMPLATE.format(query=request.query, catalog=catalog_json)},
        ]

    def parse_response(self, text: str, query: str) -> ClassifierResponse:
        try:
            response = ClassifierResponse.model_validate_json(text or "{}")
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
                for err in exc.errors()
            )
            logger.warning("Rejected classifier payload for %r: %s", query, problems)
            raise ClassifierError(f"invalid classifier response ({problems})", query) from exc
        if not math.isfinite(response.matchScore):
            logger.warning("Rejected classifier payload for %r: non-finite matchScore", query)
            raise ClassifierError(
                f"invalid classifier response (matchScore: {response.matchScore} is not finite)", query,
            )
        return response

    def classify(self, query: str, catalog: Sequence[FunctionEntry]) -> ClassificationResult:
        if not query or not query.strip():
            raise EmptyQueryError("Query must not be blank")

        request = self.build_request(query, catalog)
        try:
            text = self._model.chat(
                self.render_messages(request),
                response_schema=request.response_schema,
            )
        except Exception as exc:
            raise ClassifierError(f"{type(exc).__name__}: {exc}", query) from exc

        response = self.parse_response(text, query)

        score = response.matchScore
        if not 0.0 <= score <= 1.0:
            logger.warning("Classifier score %s for %r out of range, clamping", score, query)
            score = min(max(score, 0.0), 1.0)

        matched: FunctionEntry | None = None
        if response.isDefined and response.matchedFunctionId:
            matched = next((e for e in catalog if e.id == response.matchedFunctionId), None)
            if matched is None:
                logger.debug(
                    "Matched id %r for %r not in catalog, leaving match empty",
                    response.matchedFunctionId, query,
                )

        return ClassificationResult(
            is_defined=response.isDefined,
            match_score=score,
            matched_function=matched,
            reasoning=response.reasoning,
            suggested_improvement=response.suggestedImprovement,
        )
