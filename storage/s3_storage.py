"""Amazon S3 storage implementation."""

from __future__ import annotations

import logging
from typing import IO

import boto3
from botocore.exceptions import ClientError

from utils.errors import InternalConfiguration

from .abstract_storage import AbstractStorage

logger = logging.getLogger(__name__)


class S3Storage(AbstractStorage):
    """Store recordings as objects in a single S3 bucket."""

    def __init__(self, bucket_name: str | None, region: str | None = None, client=None):
        self.bucket_name = bucket_name
        self.region = region
        self._s3_client = client

    @property
    def s3_client(self):
        """Lazy-load the boto3 client on first use."""

        if self._s3_client is None:
            self._s3_client = boto3.client("s3", region_name=self.region)
        return self._s3_client

    def check_configured(self) -> None:
        if not self.bucket_name:
            raise InternalConfiguration("S3 bucket name")

    def object_url(self, key: str) -> str:
        if self.region:
            return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{key}"
        return f"https://{self.bucket_name}.s3.amazonaws.com/{key}"

    def save(self, file_obj: IO[bytes], key: str, content_type: str | None = None) -> str:
        self.check_configured()
        extra_args = {"ContentType": content_type} if content_type else None
        try:
            self.s3_client.upload_fileobj(file_obj, self.bucket_name, key, ExtraArgs=extra_args)
        except ClientError:
            logger.exception("Error uploading %s to S3", key)
            raise
        url = self.object_url(key)
        logger.info("Successfully uploaded to %s", url)
        return url

    def delete(self, key: str) -> None:
        self.check_configured()
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
        except ClientError:
            logger.exception("Error deleting %s from S3", key)
            raise
        logger.info("Successfully deleted %s from %s", key, self.bucket_name)

    def exists(self, key: str) -> bool:
        self.check_configured()
        try:
            self.s3_client.head_object(Bucket=self.bucket_name, Key=key)
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in {"404", "NoSuchKey", "NotFound"}:
                return False
            raise
        return True
