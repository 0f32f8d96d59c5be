"""
S3 Tools

Idempotent tools for submission archive storage in S3.
Objects are written under deterministic keys, so a repeated write for the
same submission overwrites the earlier object.
"""

from typing import BinaryIO
from urllib.parse import urlparse

import boto3
from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import BotoCoreError, ClientError
import structlog
from urllib3.exceptions import HTTPError as UrllibHTTPError

from submissions.config import get_settings
from submissions.exceptions import UploadFailedError

log = structlog.get_logger()

# Errors raised by the S3 write stream or by reading the source stream mid-copy
_UPLOAD_ERRORS = (
    ClientError,
    BotoCoreError,
    S3UploadFailedError,
    UrllibHTTPError,
    OSError,
)


def _get_client():
    """Get S3 client."""
    settings = get_settings()
    return boto3.client("s3", **settings.s3_config)


def _parse_s3_uri(s3_uri: str) -> tuple[str, str]:
    """
    Parse an S3 URI into bucket and key.

    Args:
        s3_uri: S3 URI (s3://bucket/key)

    Returns:
        Tuple of (bucket, key)

    Raises:
        ValueError: If URI is invalid
    """
    parsed = urlparse(s3_uri)
    if parsed.scheme != "s3":
        raise ValueError(f"Invalid S3 URI scheme: {parsed.scheme}")

    bucket = parsed.netloc
    key = parsed.path.lstrip("/")

    return bucket, key


def build_object_key(storage_key: str, *, prefix: str | None = None) -> str:
    """
    Build the S3 object key for a derived submission key.

    Format: {prefix}{storage_key}
    """
    settings = get_settings()
    key_prefix = settings.s3_submissions_prefix if prefix is None else prefix
    return f"{key_prefix}{storage_key}"


def stream_submission(
    stream: BinaryIO,
    key: str,
    *,
    content_type: str = "application/zip",
    bucket: str | None = None,
    client=None,
) -> str:
    """
    Stream a file-like object into S3.

    boto3's managed transfer reads the source while parts are uploading,
    so an error can surface after part of the payload has been consumed.
    No rollback is attempted; a partial object is overwritten by the next
    successful write to the same key.

    Args:
        stream: Readable binary stream (not yet consumed)
        key: Full S3 object key
        content_type: MIME type stored as object metadata
        bucket: Override bucket (default: from settings)
        client: Override S3 client

    Returns:
        S3 URI of the stored object

    Raises:
        UploadFailedError: If the write fails at any point
    """
    settings = get_settings()
    s3 = client or _get_client()
    bucket_name = bucket or settings.s3_bucket_name

    log.info(
        "streaming_submission",
        bucket=bucket_name,
        key=key,
        content_type=content_type,
    )

    try:
        s3.upload_fileobj(
            Fileobj=stream,
            Bucket=bucket_name,
            Key=key,
            ExtraArgs={"ContentType": content_type},
        )
    except _UPLOAD_ERRORS as e:
        log.error(
            "s3_upload_failed",
            bucket=bucket_name,
            key=key,
            error_type=type(e).__name__,
            error=str(e),
        )
        raise UploadFailedError(
            bucket=bucket_name,
            key=key,
            error_message=str(e),
        ) from e

    s3_uri = f"s3://{bucket_name}/{key}"

    log.info("submission_stored", s3_uri=s3_uri)

    return s3_uri


def get_submission_url(
    s3_uri: str,
    *,
    expires_in: int = 3600,
    client=None,
) -> str:
    """
    Generate a presigned URL for a stored submission.

    Args:
        s3_uri: S3 URI of the submission
        expires_in: URL expiration time in seconds (default: 1 hour)
        client: Override S3 client

    Returns:
        Presigned URL

    Raises:
        ValueError: If s3_uri is not an s3:// URI
        ClientError: If presigning fails
    """
    s3 = client or _get_client()
    bucket, key = _parse_s3_uri(s3_uri)

    url = s3.generate_presigned_url(
        "get_object",
        Params={"Bucket": bucket, "Key": key},
        ExpiresIn=expires_in,
    )

    log.debug(
        "presigned_url_generated",
        s3_uri=s3_uri,
        expires_in=expires_in,
    )

    return url
