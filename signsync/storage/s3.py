"""S3-compatible remote store (AWS S3, MinIO, SeaweedFS)."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import BinaryIO

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from signsync.errors import FetchError, ListingError

from .base import RemoteStore

log = logging.getLogger(__name__)


class S3RemoteStore(RemoteStore):
    """Read-only S3 store; credentials come from the standard boto3 chain."""

    def __init__(
        self,
        bucket_name: str,
        region: str = "sa-east-1",
        prefix: str = "",
        endpoint_url: str | None = None,
        aws_access_key_id: str | None = None,
        aws_secret_access_key: str | None = None,
        aws_session_token: str | None = None,
        connect_timeout: float = 10.0,
        read_timeout: float = 60.0,
        max_attempts: int = 3,
    ):
        self.bucket = bucket_name
        self.prefix = prefix

        kwargs: dict = {
            "config": Config(
                region_name=region,
                signature_version="s3v4",
                connect_timeout=connect_timeout,
                read_timeout=read_timeout,
                retries={"max_attempts": max_attempts, "mode": "standard"},
            ),
        }
        if aws_access_key_id and aws_secret_access_key:
            kwargs["aws_access_key_id"] = aws_access_key_id
            kwargs["aws_secret_access_key"] = aws_secret_access_key
        if aws_session_token:
            kwargs["aws_session_token"] = aws_session_token
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url

        self._client = boto3.client("s3", **kwargs)

    def iter_pages(self) -> Iterator[list[str]]:
        params = {"Bucket": self.bucket}
        if self.prefix:
            params["Prefix"] = self.prefix

        paginator = self._client.get_paginator("list_objects_v2")
        try:
            for page_number, page in enumerate(paginator.paginate(**params), start=1):
                keys = [obj["Key"] for obj in page.get("Contents", []) if obj.get("Key")]
                log.debug("Listing page %d of s3://%s: %d keys", page_number, self.bucket, len(keys))
                yield keys
        except (BotoCoreError, ClientError) as e:
            raise ListingError(f"Failed to list s3://{self.bucket}/{self.prefix}: {e}") from e

    @contextmanager
    def open_object(self, key: str) -> Iterator[BinaryIO]:
        try:
            response = self._client.get_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            raise FetchError(key, str(e)) from e

        body = response["Body"]
        try:
            yield body
        except (BotoCoreError, ClientError) as e:
            raise FetchError(key, str(e)) from e
        finally:
            body.close()
