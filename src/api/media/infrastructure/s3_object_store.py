"""S3 implementation of IObjectStore.

boto3 is synchronous, so every call runs in a worker thread to keep the
event loop free.
"""

from __future__ import annotations

import asyncio
from typing import Any, Sequence

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from infrastructure.settings import StorageSettings
from media.domain.value_objects import StoredObject
from media.ports.exceptions import ObjectStoreError
from media.ports.object_store import IObjectStore

_NOT_FOUND_CODES = frozenset({"NoSuchKey", "404", "NotFound"})

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def create_s3_client(settings: StorageSettings) -> Any:
    """Create a boto3 S3 client from storage settings.

    Empty credentials fall through to boto3's default credential chain.
    """
    secret_key = settings.secret_key.get_secret_value()
    return boto3.client(
        "s3",
        endpoint_url=settings.endpoint_url or None,
        region_name=settings.region or None,
        aws_access_key_id=settings.access_key or None,
        aws_secret_access_key=secret_key or None,
        config=Config(
            s3={"addressing_style": "path" if settings.force_path_style else "auto"}
        ),
    )


class S3ObjectStore(IObjectStore):
    """Stores image bytes in one S3 bucket."""

    def __init__(self, client: Any, bucket: str) -> None:
        """Initialize the store.

        Args:
            client: boto3 S3 client
            bucket: Bucket holding the images
        """
        self._client = client
        self._bucket = bucket

    async def put(self, key: str, content: bytes, media_type: str) -> None:
        try:
            await asyncio.to_thread(
                self._client.put_object,
                Bucket=self._bucket,
                Key=key,
                Body=content,
                ContentType=media_type,
            )
        except (ClientError, BotoCoreError) as e:
            raise ObjectStoreError(f"Failed to store object {key}: {e}") from e

    async def get(self, key: str) -> StoredObject | None:
        try:
            response = await asyncio.to_thread(
                self._client.get_object, Bucket=self._bucket, Key=key
            )
            content = await asyncio.to_thread(response["Body"].read)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in _NOT_FOUND_CODES:
                return None
            raise ObjectStoreError(f"Failed to load object {key}: {e}") from e
        except BotoCoreError as e:
            raise ObjectStoreError(f"Failed to load object {key}: {e}") from e

        return StoredObject(
            content=content,
            media_type=response.get("ContentType") or DEFAULT_CONTENT_TYPE,
        )

    async def delete_many(self, keys: Sequence[str]) -> None:
        if not keys:
            return
        try:
            response = await asyncio.to_thread(
                self._client.delete_objects,
                Bucket=self._bucket,
                Delete={"Objects": [{"Key": key} for key in keys], "Quiet": True},
            )
        except (ClientError, BotoCoreError) as e:
            raise ObjectStoreError(f"Failed to delete objects: {e}") from e

        errors = response.get("Errors") or []
        if errors:
            first = errors[0]
            raise ObjectStoreError(
                f"Failed to delete {len(errors)} objects, "
                f"first {first.get('Key')}: {first.get('Code')}"
            )
