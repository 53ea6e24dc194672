import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from gradeflow.core.errors import StorageFailure
from gradeflow.storage.base import BlobStore

logger = logging.getLogger(__name__)


class S3BlobStore(BlobStore):
    """S3 (or S3-compatible) object storage."""

    def __init__(self, bucket: str, region: str, endpoint_url: str | None = None, client=None):
        self.bucket = bucket
        self.region = region
        self.endpoint_url = endpoint_url
        # boto3 clients are safe to share between threads
        self._s3 = client or boto3.client(
            "s3",
            region_name=region,
            endpoint_url=endpoint_url,
        )

    def locator(self, key: str) -> str:
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    def put(self, key: str, data: bytes, content_type: str) -> str:
        try:
            self._s3.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except ClientError as e:
            code = (e.response.get("Error") or {}).get("Code")
            logger.error("S3 put_object failed for %s (%s)", key, code)
            raise StorageFailure(f"Upload failed: {code or 'S3 error'}") from e
        except BotoCoreError as e:
            logger.error("S3 put_object failed for %s: %s", key, e)
            raise StorageFailure("Upload failed: storage unavailable") from e

        return self.locator(key)
