"""Pluggable classifier model providers behind IModelProvider."""

from __future__ import annotations

from funcaudit.core.config import AppSettings
from funcaudit.core.protocols import IModelProvider
from funcaudit.model_providers.gemini_provider import GeminiModelProvider
from funcaudit.model_providers.mock_provider import MockModelProvider


def create_model_provider(settings: AppSettings | None = None) -> IModelProvider:
    """Build the provider selected by ``settings.llm.provider``."""
    if settings is None:
        settings = AppSettings()

    llm = settings.llm
    if llm.provider == "gemini":
        return GeminiModelProvider(
            api_key=llm.gemini_api_key,
            model=llm.gemini_model,
            base_url=llm.gemini_base_url,
            temperature=llm.temperature,
            timeout=llm.timeout,
        )
    return MockModelProvider()
