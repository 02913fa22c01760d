import boto3

from shop_api.s3.delete_objects import delete_s3_object
from shop_api.s3.read_objects import (
    fetch_s3_object_metadata,
    fetch_s3_objects_metadata,
    generate_presigned_get_url,
    object_exists_in_s3,
)
from shop_api.s3.write_objects import upload_s3_object
from tests.consts import PNG_BYTES, TEST_BUCKET_NAME


def test__upload_s3_object__stores_content_type_and_metadata(mocked_aws):
    s3_client = boto3.client("s3")
    upload_s3_object(
        TEST_BUCKET_NAME,
        "uploads/u1/1_front.png",
        PNG_BYTES,
        content_type="image/png",
        metadata={"uploaded-by": "u1"},
        s3_client=s3_client,
    )

    response = s3_client.get_object(Bucket=TEST_BUCKET_NAME, Key="uploads/u1/1_front.png")
    assert response["Body"].read() == PNG_BYTES
    assert response["ContentType"] == "image/png"
    assert response["Metadata"] == {"uploaded-by": "u1"}


def test__object_exists_in_s3(mocked_aws):
    upload_s3_object(TEST_BUCKET_NAME, "uploads/u1/a.png", PNG_BYTES)

    assert object_exists_in_s3(TEST_BUCKET_NAME, "uploads/u1/a.png") is True
    assert object_exists_in_s3(TEST_BUCKET_NAME, "uploads/u1/missing.png") is False


def test__fetch_s3_object_metadata(mocked_aws):
    upload_s3_object(TEST_BUCKET_NAME, "avatars/u1/me.png", PNG_BYTES, content_type="image/png")

    head = fetch_s3_object_metadata(TEST_BUCKET_NAME, "avatars/u1/me.png")
    assert head["ContentLength"] == len(PNG_BYTES)
    assert head["ContentType"] == "image/png"

    assert fetch_s3_object_metadata(TEST_BUCKET_NAME, "avatars/u1/missing.png") is None


def test__fetch_s3_objects_metadata__filters_by_prefix(mocked_aws):
    upload_s3_object(TEST_BUCKET_NAME, "uploads/u1/a.png", PNG_BYTES)
    upload_s3_object(TEST_BUCKET_NAME, "uploads/u1/b.png", PNG_BYTES)
    upload_s3_object(TEST_BUCKET_NAME, "uploads/u2/c.png", PNG_BYTES)

    objects = fetch_s3_objects_metadata(TEST_BUCKET_NAME, prefix="uploads/u1/")

    assert sorted(obj["Key"] for obj in objects) == ["uploads/u1/a.png", "uploads/u1/b.png"]
    assert fetch_s3_objects_metadata(TEST_BUCKET_NAME, prefix="designs/") == []


def test__generate_presigned_get_url(mocked_aws):
    upload_s3_object(TEST_BUCKET_NAME, "uploads/u1/a.png", PNG_BYTES)

    url = generate_presigned_get_url(TEST_BUCKET_NAME, "uploads/u1/a.png", expires_in_seconds=300)

    assert "uploads/u1/a.png" in url
    assert "Expires=" in url or "X-Amz-Expires=300" in url


def test__delete_s3_object(mocked_aws):
    upload_s3_object(TEST_BUCKET_NAME, "uploads/u1/a.png", PNG_BYTES)

    delete_s3_object(TEST_BUCKET_NAME, "uploads/u1/a.png")

    assert object_exists_in_s3(TEST_BUCKET_NAME, "uploads/u1/a.png") is False
