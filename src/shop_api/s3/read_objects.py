"""Functions for reading objects from an S3 bucket--the "R" in CRUD."""

from typing import List, Optional

import boto3
from botocore.exceptions import ClientError

try:
    from mypy_boto3_s3 import S3Client
    from mypy_boto3_s3.type_defs import HeadObjectOutputTypeDef, ObjectTypeDef
except ImportError:
    ...

DEFAULT_MAX_KEYS = 1000


def object_exists_in_s3(bucket_name: str, object_key: str, s3_client: Optional["S3Client"] = None) -> bool:
    """
    Check if an object exists in the S3 bucket using head_object.

    :param bucket_name: Name of the S3 bucket.
    :param object_key: Key of the object to check.
    :param s3_client: Optional S3 client to use. If not provided, a new client will be created.

    :return: True if the object exists, False otherwise.
    """
    s3_client = s3_client or boto3.client("s3")
    try:
        s3_client.head_object(Bucket=bucket_name, Key=object_key)
        return True
    except ClientError as err:
        error_code = err.response.get("Error", {}).get("Code")
        if error_code in ("404", "NoSuchKey", "NotFound"):
            return False
        raise


def fetch_s3_object_metadata(
    bucket_name: str,
    object_key: str,
    s3_client: Optional["S3Client"] = None,
) -> Optional["HeadObjectOutputTypeDef"]:
    """
    Fetch the headers and user metadata of an object without its body.

    :return: The head_object response, or None when the object does not exist.
    """
    s3_client = s3_client or boto3.client("s3")
    try:
        return s3_client.head_object(Bucket=bucket_name, Key=object_key)
    except ClientError as err:
        error_code = err.response.get("Error", {}).get("Code")
        if error_code in ("404", "NoSuchKey", "NotFound"):
            return None
        raise


def fetch_s3_objects_metadata(
    bucket_name: str,
    prefix: Optional[str] = None,
    max_keys: int = DEFAULT_MAX_KEYS,
    s3_client: Optional["S3Client"] = None,
) -> List["ObjectTypeDef"]:
    """
    Fetch metadata of up to `max_keys` objects under `prefix`.

    :param bucket_name: Name of the S3 bucket to list objects from.
    :param prefix: Prefix to filter objects by.
    :param max_keys: Maximum number of objects to return.
    :param s3_client: Optional S3 client to use. If not provided, a new client will be created.

    :return: The `Contents` entries of the listing (Key, Size, LastModified, ...).
    """
    s3_client = s3_client or boto3.client("s3")
    response = s3_client.list_objects_v2(Bucket=bucket_name, Prefix=prefix or "", MaxKeys=max_keys)
    return response.get("Contents", [])


def generate_presigned_get_url(
    bucket_name: str,
    object_key: str,
    expires_in_seconds: int,
    s3_client: Optional["S3Client"] = None,
) -> str:
    """Create a time-limited URL that lets anyone download the object."""
    s3_client = s3_client or boto3.client("s3")
    return s3_client.generate_presigned_url(
        ClientMethod="get_object",
        Params={"Bucket": bucket_name, "Key": object_key},
        ExpiresIn=expires_in_seconds,
    )
