"""S3 blob store implementing IBlobStore, one object per key under a prefix."""

from __future__ import annotations

import boto3
from botocore.exceptions import ClientError

from funcaudit.core.exceptions import StoreError


class S3BlobStore:
    """Production IBlobStore backed by S3."""

    CONTENT_TYPE = "application/json; charset=utf-8"

    def __init__(self, bucket: str, prefix: str = "", region: str = "us-east-1",
                 endpoint_url: str | None = None) -> None:
        self._bucket = bucket
        self._prefix = prefix
        self._region = region
        self._endpoint_url = endpoint_url
        kwargs: dict = {"region_name": region}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        self._client = boto3.client("s3", **kwargs)

    def _object_key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def get(self, key: str) -> str | None:
        try:
            resp = self._client.get_object(Bucket=self._bucket, Key=self._object_key(key))
            return resp["Body"].read().decode("utf-8")
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
                return None
            raise StoreError(f"S3 read failed for {key!r}: {exc}") from exc

    def set(self, key: str, value: str) -> None:
        try:
            self._client.put_object(
                Bucket=self._bucket,
                Key=self._object_key(key),
                Body=value.encode("utf-8"),
                ContentType=self.CONTENT_TYPE,
            )
        except ClientError as exc:
            raise StoreError(f"S3 write failed for {key!r}: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            self._client.delete_object(Bucket=self._bucket, Key=self._object_key(key))
        except ClientError as exc:
            raise StoreError(f"S3 delete failed for {key!r}: {exc}") from exc
