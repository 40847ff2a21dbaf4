"""Pluggable persistence backends behind Protocol interfaces."""

from __future__ import annotations

from funcaudit.core.config import AppSettings
from funcaudit.core.protocols import IBlobStore
from funcaudit.persistence.memory_backend import MemoryBlobStore
from funcaudit.persistence.redis_backend import RedisBlobStore
from funcaudit.persistence.repository import StateRepository
from funcaudit.persistence.s3_backend import S3BlobStore


def create_blob_store(settings: AppSettings) -> IBlobStore:
    backend = settings.store.backend
    if backend == "redis":
        return RedisBlobStore(
            host=settings.redis.host,
            port=settings.redis.port,
            db=settings.redis.db,
            namespace=settings.redis.namespace,
        )
    if backend == "s3":
        return S3BlobStore(
            bucket=settings.s3.bucket,
            prefix=settings.s3.prefix,
            region=settings.s3.region,
            endpoint_url=settings.s3.endpoint_url,
        )
    return MemoryBlobStore()


def create_persistence(settings: AppSettings | None = None) -> StateRepository:
    """Create the wired-up state repository from application settings."""
    if settings is None:
        settings = AppSettings()

    return StateRepository(
        create_blob_store(settings),
        catalog_key=settings.store.catalog_key,
        history_key=settings.store.history_key,
    )
