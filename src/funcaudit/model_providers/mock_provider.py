"""Mock model provider for local development and testing.

Returns canned responses. No real LLM calls.
"""

from __future__ import annotations

import json
from collections import deque
from typing import Any

from funcaudit.core.exceptions import ModelProviderError

DEFAULT_RESPONSE = json.dumps(
    {
        "isDefined": False,
        "matchScore": 0.0,
        "reasoning": "Mock classifier: no catalog entry was compared.",
        "suggestedImprovement": "Configure a real classifier provider.",
    }
)


class MockModelProvider:
    """IModelProvider implementation that returns deterministic mock responses."""

    def __init__(self, default_response: str = DEFAULT_RESPONSE) -> None:
        self._default_response = default_response
        self._canned_responses: dict[str, str | Exception] = {}
        self._queued: deque[str | Exception] = deque()
        self.calls: list[list[dict[str, str]]] = []

    def set_response(self, prompt_contains: str, response: str | Exception) -> None:
        """Register a canned response (or an exception to raise) for prompts containing a keyword."""
        self._canned_responses[prompt_contains] = response

    def queue_response(self, response: str | Exception) -> None:
        """Queue a one-shot response; queued responses are served before canned ones."""
        self._queued.append(response)

    def chat(self, messages: list[dict[str, str]], **kwargs: Any) -> str:
        self.calls.append(messages)
        if self._queued:
            return self._serve(self._queued.popleft())
        last_content = messages[-1].get("content", "") if messages else ""
        for keyword, response in self._canned_responses.items():
            if keyword in last_content:
                return self._serve(response)
        return self._default_response

    @staticmethod
    def _serve(response: str | Exception) -> str:
        if isinstance(response, Exception):
            raise response
        return response


class FailingModelProvider:
    """IModelProvider that always fails, for exercising error paths."""

    def __init__(self, message: str = "classifier unavailable") -> None:
        self._message = message

    def chat(self, messages: list[dict[str, str]], **kwargs: Any) -> str:
        raise ModelProviderError(self._message)
