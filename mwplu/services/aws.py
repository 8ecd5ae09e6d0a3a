from __future__ import annotations

from typing import Any

import boto3
from botocore.config import Config

from ..config import settings


def boto3_client(service: str) -> Any:
    """Build a client from settings; S3 gets SigV4 so presigned links work in every region."""
    config = Config(retries={"max_attempts": 3})
    if service == "s3":
        config = config.merge(Config(signature_version="s3v4"))

    kwargs: dict[str, Any] = {"region_name": settings.aws.region, "config": config}
    if settings.aws.access_key_id and settings.aws.secret_access_key:
        kwargs.update(
            aws_access_key_id=settings.aws.access_key_id,
            aws_secret_access_key=settings.aws.secret_access_key,
        )
    if service == "s3" and settings.aws.s3_endpoint_url:
        kwargs["endpoint_url"] = settings.aws.s3_endpoint_url
    return boto3.client(service, **kwargs)
