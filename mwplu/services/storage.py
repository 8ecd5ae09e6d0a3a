from __future__ import annotations

from datetime import timedelta
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError

from ..config import settings
from .aws import boto3_client


class StorageService:
    """Object storage holding the downloadable PLU documents."""

    def __init__(self, bucket: Optional[str] = None) -> None:
        self.bucket = bucket or settings.aws.s3_bucket
        self._client = boto3_client("s3")

    def generate_presigned_url(self, key: str, ttl: timedelta | None = None) -> str:
        ttl = ttl or timedelta(seconds=settings.download_url_ttl_seconds)
        try:
            return self._client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=int(ttl.total_seconds()),
            )
        except (BotoCoreError, ClientError) as exc:
            raise RuntimeError(f"Failed to generate presigned URL: {exc}") from exc


def get_storage_service() -> StorageService:
    return StorageService()
