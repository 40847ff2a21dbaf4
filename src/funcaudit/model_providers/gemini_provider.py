"""Gemini model provider over the Generative Language REST API.

Used as the production semantic classifier. The system message becomes
``systemInstruction``; a ``response_schema`` kwarg switches the call to
JSON mode with that schema.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from funcaudit.core.exceptions import ModelProviderError

logger = logging.getLogger(__name__)


class GeminiModelProvider:
    """IModelProvider backed by ``models/{model}:generateContent``."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-3-flash-preview",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        temperature: float = 0.0,
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        if not api_key:
            raise ModelProviderError("Gemini API key is not configured")
        self._api_key = api_key
        self._model = model
        self._temperature = temperature
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def build_payload(self, messages: list[dict[str, str]], **kwargs: Any) -> dict[str, Any]:
        system_parts = [m["content"] for m in messages if m.get("role") == "system"]
        contents = [
            {
                "role": "model" if m.get("role") == "assistant" else "user",
                "parts": [{"text": m["content"]}],
            }
            for m in messages
            if m.get("role") != "system"
        ]
        generation_config: dict[str, Any] = {"temperature": kwargs.get("temperature", self._temperature)}
        schema = kwargs.get("response_schema")
        if schema is not None:
            generation_config["responseMimeType"] = "application/json"
            generation_config["responseSchema"] = schema

        payload: dict[str, Any] = {"contents": contents, "generationConfig": generation_config}
        if system_parts:
            payload["systemInstruction"] = {"parts": [{"text": "\n\n".join(system_parts)}]}
        return payload

    def chat(self, messages: list[dict[str, str]], **kwargs: Any) -> str:
        payload = self.build_payload(messages, **kwargs)
        try:
            response = self._client.post(
                f"/models/{self._model}:generateContent",
                params={"key": self._api_key},
                json=payload,
            )
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise ModelProviderError(f"Gemini request timed out: {exc}") from exc
        except httpx.HTTPStatusError as exc:
            raise ModelProviderError(
                f"Gemini returned HTTP {exc.response.status_code}: {exc.response.text[:200]}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ModelProviderError(f"Gemini request failed: {exc}") from exc

        try:
            body = response.json()
            parts = body["candidates"][0]["content"]["parts"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise ModelProviderError(f"Gemini response has no candidate text: {exc}") from exc

        text = "".join(p.get("text", "") for p in parts if isinstance(p, dict))
        logger.debug("Gemini %s returned %d chars", self._model, len(text))
        return text
