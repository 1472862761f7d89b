"""
Object store adapter (S3 / S3-compatible).

Blocking boto3 calls; async callers run them with asyncio.to_thread.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..errors import NotFoundError, StoreFailure

logger = logging.getLogger(__name__)

# delete_objects accepts at most 1000 keys per request
DELETE_BATCH = 1000
LIST_PAGE = 1000

_MISSING_CODES = ("404", "NoSuchKey", "NotFound")


def create_s3_client(settings) -> Any:
    """Create the boto3 S3 client from settings."""
    return boto3.client(
        "s3",
        region_name=settings.AWS_REGION,
        endpoint_url=settings.S3_ENDPOINT_URL,
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
    )


def _error_code(error: ClientError) -> str:
    return str((error.response.get("Error") or {}).get("Code"))


class S3ObjectStore:
    """put/get/delete/list of binary payloads keyed by object key."""

    def __init__(self, client: Any, bucket: str):
        self.client = client
        self.bucket = bucket

    def put(
        self,
        key: str,
        data: bytes,
        content_type: str = "application/octet-stream",
        cache_control: Optional[str] = None,
        metadata: Optional[Dict[str, str]] = None,
    ) -> None:
        params = {
            "Bucket": self.bucket,
            "Key": key,
            "Body": data,
            "ContentType": content_type,
        }
        if cache_control:
            params["CacheControl"] = cache_control
        if metadata:
            params["Metadata"] = metadata

        try:
            self.client.put_object(**params)
        except (BotoCoreError, ClientError) as e:
            raise StoreFailure(f"Upload failed for {key}: {e}") from e

    def get(self, key: str) -> bytes:
        try:
            resp = self.client.get_object(Bucket=self.bucket, Key=key)
            return resp["Body"].read()
        except ClientError as e:
            if _error_code(e) in _MISSING_CODES:
                raise NotFoundError(f"Object not found: {key}") from e
            raise StoreFailure(f"Download failed for {key}: {e}") from e
        except BotoCoreError as e:
            raise StoreFailure(f"Download failed for {key}: {e}") from e

    def exists(self, key: str) -> bool:
        try:
            self.client.head_object(Bucket=self.bucket, Key=key)
            return True
        except ClientError as e:
            if _error_code(e) in _MISSING_CODES:
                return False
            raise StoreFailure(f"Lookup failed for {key}: {e}") from e
        except BotoCoreError as e:
            raise StoreFailure(f"Lookup failed for {key}: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            raise StoreFailure(f"Delete failed for {key}: {e}") from e

    def list_keys(self, prefix: str = "") -> List[str]:
        """All keys under prefix, following continuation tokens."""
        keys = []
        continuation_token = None

        try:
            while True:
                list_kw = {"Bucket": self.bucket, "MaxKeys": LIST_PAGE, "Prefix": prefix}
                if continuation_token:
                    list_kw["ContinuationToken"] = continuation_token

                resp = self.client.list_objects_v2(**list_kw)
                keys.extend(obj["Key"] for obj in resp.get("Contents") or [])

                if not resp.get("IsTruncated"):
                    break
                continuation_token = resp.get("NextContinuationToken")
        except (BotoCoreError, ClientError) as e:
            raise StoreFailure(f"Listing failed for prefix '{prefix}': {e}") from e

        return keys

    def delete_many(self, keys: Iterable[str]) -> int:
        """Delete keys in batches of DELETE_BATCH. Returns number of deleted keys."""
        objects = [{"Key": key} for key in keys]
        total_deleted = 0

        for i in range(0, len(objects), DELETE_BATCH):
            batch = objects[i : i + DELETE_BATCH]
            try:
                resp = self.client.delete_objects(
                    Bucket=self.bucket,
                    Delete={"Objects": batch, "Quiet": True},
                )
            except (BotoCoreError, ClientError) as e:
                raise StoreFailure(f"Batch delete failed after {total_deleted} objects: {e}") from e

            errors = resp.get("Errors") or []
            for error in errors:
                logger.warning(f"Could not delete {error.get('Key')}: {error.get('Message')}")
            total_deleted += len(batch) - len(errors)
            logger.info(f"Deleted batch {i // DELETE_BATCH + 1}: {len(batch) - len(errors)} objects")

        return total_deleted
