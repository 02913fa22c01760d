"""S3 client construction."""

import boto3

from shop_api.config.settings import Settings

try:
    from mypy_boto3_s3 import S3Client
except ImportError:
    ...


def get_s3_client(settings: Settings) -> "S3Client":
    """Create an S3 client for the configured region, credentials and endpoint."""
    return boto3.client(
        "s3",
        region_name=settings.aws_region,
        endpoint_url=settings.aws_endpoint_url,
        aws_access_key_id=settings.aws_access_key_id,
        aws_secret_access_key=settings.aws_secret_access_key,
    )
