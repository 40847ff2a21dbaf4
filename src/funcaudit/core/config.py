"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class LLMConfig(BaseSettings):
    """Classifier model provider configuration."""

    model_config = {"env_prefix": "FUNCAUDIT_LLM_"}

    provider: Literal["mock", "gemini"] = "mock"
    gemini_model: str = "gemini-3-flash-preview"
    gemini_api_key: str = ""
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    temperature: float = 0.0
    timeout: float = 30.0


class AuditConfig(BaseSettings):
    """Classification and batch run tuning."""

    model_config = {"env_prefix": "FUNCAUDIT_AUDIT_"}

    catalog_cap: int = 100  # entries embedded in each classifier request
    batch_pause_seconds: float = 0.5


class StoreConfig(BaseSettings):
    """Blob store selection and the keys of the two persisted blobs."""

    model_config = {"env_prefix": "FUNCAUDIT_STORE_"}

    backend: Literal["memory", "redis", "s3"] = "memory"
    catalog_key: str = "app_functions_db"
    history_key: str = "app_search_history"


class RedisConfig(BaseSettings):
    """Redis blob store configuration."""

    model_config = {"env_prefix": "FUNCAUDIT_REDIS_"}

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    namespace: str = "funcaudit:"


class S3Config(BaseSettings):
    """S3 blob store configuration."""

    model_config = {"env_prefix": "FUNCAUDIT_S3_"}

    bucket: str = "funcaudit-state"
    prefix: str = "state/"
    region: str = "us-east-1"
    endpoint_url: str | None = None  # LocalStack override


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "FUNCAUDIT_"}

    environment: Literal["dev", "uat", "prod"] = "dev"
    log_level: str = "INFO"

    llm: LLMConfig = LLMConfig()
    audit: AuditConfig = AuditConfig()
    store: StoreConfig = StoreConfig()
    redis: RedisConfig = RedisConfig()
    s3: S3Config = S3Config()
