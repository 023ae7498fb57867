"""S3 object storage client.

boto3 is synchronous, so every call runs in a worker thread. Records store
bucket keys, never full URLs.
"""

import asyncio
import secrets
import time
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from src.vitelis.core.config import get_settings
from src.vitelis.core.exceptions import NotFoundError, UpstreamError
from src.vitelis.core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class StoredObject:
    body: bytes
    content_type: str


def build_object_key(folder: str, extension: str) -> str:
    """Build a unique key like ``folder/1718000000000-a1b2c3.yaml``."""
    timestamp = int(time.time() * 1000)
    return f"{folder}/{timestamp}-{secrets.token_hex(3)}.{extension.lstrip('.')}"


class ObjectStorage:
    def __init__(self, client: Any, bucket: str):
        self.client = client
        self.bucket = bucket

    async def upload(self, key: str, body: bytes, content_type: str) -> str:
        """Upload bytes under ``key`` and return the key."""
        try:
            await asyncio.to_thread(
                self.client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("s3_upload_failed", key=key, error=str(e))
            raise UpstreamError("Failed to upload file to storage") from e

        logger.info("s3_upload_completed", key=key, size=len(body))
        return key

    async def download(self, key: str) -> StoredObject:
        try:
            response = await asyncio.to_thread(
                self.client.get_object, Bucket=self.bucket, Key=key
            )
            body = await asyncio.to_thread(response["Body"].read)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
                raise NotFoundError(f"Object {key} not found") from e
            logger.error("s3_download_failed", key=key, error=str(e))
            raise UpstreamError("Failed to read file from storage") from e
        except BotoCoreError as e:
            logger.error("s3_download_failed", key=key, error=str(e))
            raise UpstreamError("Failed to read file from storage") from e

        return StoredObject(
            body=body,
            content_type=response.get("ContentType") or "application/octet-stream",
        )


@lru_cache
def get_storage() -> ObjectStorage:
    """Get the object storage singleton."""
    settings = get_settings()
    client = boto3.client(
        "s3",
        region_name=settings.aws_region,
        aws_access_key_id=settings.aws_access_key_id,
        aws_secret_access_key=settings.aws_secret_access_key,
        endpoint_url=settings.aws_s3_endpoint_url,
    )
    return ObjectStorage(client, settings.aws_s3_bucket)
