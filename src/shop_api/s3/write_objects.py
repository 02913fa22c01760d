"""Writes to the image bucket."""

from typing import Dict, Optional

import boto3
from botocore.exceptions import ConnectionClosedError, EndpointConnectionError

from shop_api.utils.decorators import retry

try:
    from mypy_boto3_s3 import S3Client
except ImportError:
    ...


@retry(max_attempts=3, delay=0.5, exceptions=(EndpointConnectionError, ConnectionClosedError))
def upload_s3_object(
    bucket_name: str,
    object_key: str,
    file_content: bytes,
    content_type: Optional[str] = None,
    metadata: Optional[Dict[str, str]] = None,
    s3_client: Optional["S3Client"] = None,
) -> None:
    """
    Store ``file_content`` under ``object_key``, overwriting any existing object.

    :param content_type: Stored as the object's ``Content-Type``; defaults to ``application/octet-stream``.
    :param metadata: S3 user metadata. Keys and values must be ASCII.
    :param s3_client: Client to use; a default boto3 client is created when omitted.
    """
    s3_client = s3_client or boto3.client("s3")
    s3_client.put_object(
        Bucket=bucket_name,
        Key=object_key,
        Body=file_content,
        ContentType=content_type or "application/octet-stream",
        Metadata=metadata or {},
    )
