"""Factory for creating the remote store from configuration."""

import logging
import os

from signsync.config.schema import StorageConfig

from .base import RemoteStore

log = logging.getLogger(__name__)


def create_remote_store(storage: StorageConfig) -> RemoteStore | None:
    """Create the RemoteStore described by *storage*.

    Returns None when no bucket is configured, in which case only the local
    media directory is served.

    Explicit AWS keys are read from the environment when present; otherwise
    boto3 falls back to its default credential chain.
    """
    if not storage.enabled:
        log.info("No bucket configured, remote sync disabled")
        return None

    from .s3 import S3RemoteStore

    store = S3RemoteStore(
        bucket_name=storage.bucket,
        region=storage.region,
        prefix=storage.prefix,
        endpoint_url=storage.endpoint_url,
        aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID"),
        aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY"),
        aws_session_token=os.getenv("AWS_SESSION_TOKEN"),
        connect_timeout=storage.connect_timeout,
        read_timeout=storage.read_timeout,
        max_attempts=storage.max_attempts,
    )
    log.info("Remote sync enabled: s3://%s/%s (%s)", storage.bucket, storage.prefix, storage.region)
    return store
