"""
Image storage on S3.

Objects are laid out per user:

- ``uploads/{uid}/{ms}_{name}``: free-form uploads
- ``designs/{uid}/{design_id}/{ms}_{name}``: design previews
- ``avatars/{uid}/{ms}_{name}``: profile pictures

where ``ms`` is the upload time in milliseconds since the epoch.
"""

import logging
import os
import re
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import quote, unquote

from database import DocumentStore
from shop_api.config.settings import Settings
from shop_api.errors import (
    InvalidRequestError,
    NotFoundError,
    PayloadTooLargeError,
    PermissionDeniedError,
)
from shop_api.s3.delete_objects import delete_s3_object
from shop_api.s3.read_objects import (
    fetch_s3_object_metadata,
    fetch_s3_objects_metadata,
    generate_presigned_get_url,
    object_exists_in_s3,
)
from shop_api.s3.write_objects import upload_s3_object
from shop_api.services.designs import DesignService
from shop_api.services.users import UserService
from shop_api.utils.decorators import log_execution_time

try:
    from mypy_boto3_s3 import S3Client
except ImportError:
    ...

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {"jpeg", "jpg", "png", "gif", "webp"}
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}
USER_FOLDERS = ("uploads", "designs", "avatars")

UNSAFE_NAME_CHARACTERS = re.compile(r"[^A-Za-z0-9._-]+")


class ImageFile:
    """An uploaded file read fully into memory."""

    def __init__(self, filename: Optional[str], content_type: Optional[str], content: bytes):
        self.filename = filename or ""
        self.content_type = (content_type or "").lower()
        self.content = content

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        return os.path.splitext(self.filename)[1].lstrip(".").lower()


def safe_file_name(filename: str) -> str:
    name = UNSAFE_NAME_CHARACTERS.sub("_", os.path.basename(filename)).strip("._")
    return name or "image"


def object_key(folder: str, *parts: str, filename: str) -> str:
    millis = int(time.time() * 1000)
    return "/".join([folder, *parts, f"{millis}_{safe_file_name(filename)}"])


class ImageService:
    """Validates images, stores them in the bucket and reads them back"""

    def __init__(self, settings: Settings, s3_client: "S3Client", store: DocumentStore):
        self.settings = settings
        self.bucket_name = settings.s3_bucket_name
        self.s3_client = s3_client
        self.designs = DesignService(store)
        self.users = UserService(store)

    def validate(self, image: ImageFile) -> None:
        """Reject empty files, files over the size limit and anything that is not an image."""
        if image.size == 0:
            raise InvalidRequestError("The uploaded file is empty", error="No file uploaded")
        if image.size > self.settings.max_image_bytes:
            raise PayloadTooLargeError(
                f"Images may be at most {self.settings.max_image_bytes} bytes; got {image.size}"
            )
        if image.extension not in ALLOWED_EXTENSIONS or image.content_type not in ALLOWED_CONTENT_TYPES:
            raise InvalidRequestError(
                "Only image files (jpeg, jpg, png, gif, webp) are allowed",
                error="Invalid file type",
                details={"filename": image.filename, "content_type": image.content_type},
            )

    @log_execution_time
    def upload_image(self, image: ImageFile, key: str, uploaded_by: str) -> Dict[str, Any]:
        uploaded_at = datetime.now(timezone.utc)
        upload_s3_object(
            bucket_name=self.bucket_name,
            object_key=key,
            file_content=image.content,
            content_type=image.content_type,
            metadata={
                "original-name": quote(image.filename),
                "uploaded-by": uploaded_by,
                "uploaded-at": uploaded_at.isoformat(),
            },
            s3_client=self.s3_client,
        )
        logger.info(f"Stored image s3://{self.bucket_name}/{key} ({image.size} bytes)")
        return {
            "url": self.settings.public_url(key),
            "file_name": key,
            "original_name": image.filename,
            "size": image.size,
            "content_type": image.content_type,
            "uploaded_at": uploaded_at,
        }

    def upload_user_image(self, uid: str, image: ImageFile) -> Dict[str, Any]:
        self.validate(image)
        return self.upload_image(image, object_key("uploads", uid, filename=image.filename), uid)

    def upload_user_images(self, uid: str, images: Sequence[ImageFile]) -> List[Dict[str, Any]]:
        """Upload a batch of images. Nothing is stored unless every file is valid."""
        if not images:
            raise InvalidRequestError("Select at least one image to upload", error="No files uploaded")
        if len(images) > self.settings.max_images_per_request:
            raise InvalidRequestError(
                f"At most {self.settings.max_images_per_request} images can be uploaded at once",
                error="Too many files",
            )
        for image in images:
            self.validate(image)
        return [
            self.upload_image(image, object_key("uploads", uid, filename=f"{index}_{image.filename}"), uid)
            for index, image in enumerate(images)
        ]

    def upload_design_image(self, uid: str, design_id: str, image: ImageFile) -> Dict[str, Any]:
        """Store a design preview and point the design's ``preview_image`` at it."""
        self.designs.require_owned(design_id, uid)
        self.validate(image)
        uploaded = self.upload_image(image, object_key("designs", uid, design_id, filename=image.filename), uid)
        self.designs.set_preview_image(design_id, uploaded["url"])
        return {**uploaded, "design_id": design_id}

    def upload_avatar(self, uid: str, image: ImageFile) -> Dict[str, Any]:
        """Store a profile picture; the user's ``picture`` follows when a profile exists."""
        self.validate(image)
        uploaded = self.upload_image(image, object_key("avatars", uid, filename=image.filename), uid)
        self.users.set_picture(uid, uploaded["url"])
        return uploaded

    def _check_owned_key(self, uid: str, key: str) -> None:
        parts = key.split("/")
        if len(parts) < 3 or parts[0] not in USER_FOLDERS or parts[1] != uid:
            raise PermissionDeniedError("You can only manage images in your own folders")

    def _require_object(self, key: str) -> None:
        if not object_exists_in_s3(self.bucket_name, key, s3_client=self.s3_client):
            raise NotFoundError(f"No image stored at {key}", error="Image not found")

    def delete_image(self, uid: str, key: str) -> None:
        self._check_owned_key(uid, key)
        self._require_object(key)
        delete_s3_object(self.bucket_name, key, s3_client=self.s3_client)
        logger.info(f"Deleted image s3://{self.bucket_name}/{key}")

    def get_metadata(self, key: str) -> Dict[str, Any]:
        head = fetch_s3_object_metadata(self.bucket_name, key, s3_client=self.s3_client)
        if head is None:
            raise NotFoundError(f"No image stored at {key}", error="Image not found")
        metadata = dict(head.get("Metadata", {}))
        if "original-name" in metadata:
            metadata["original-name"] = unquote(metadata["original-name"])
        return {
            "name": key,
            "size": head["ContentLength"],
            "content_type": head.get("ContentType", "application/octet-stream"),
            "last_modified": head["LastModified"],
            "metadata": metadata,
        }

    def generate_signed_url(self, key: str, expiration_minutes: int = 60) -> Dict[str, Any]:
        self._require_object(key)
        signed_url = generate_presigned_get_url(
            self.bucket_name, key, expiration_minutes * 60, s3_client=self.s3_client
        )
        return {"signed_url": signed_url, "expires_in": expiration_minutes}

    def list_user_images(self, uid: str) -> List[Dict[str, Any]]:
        """Every object in the caller's folders, newest first."""
        images = []
        for folder in USER_FOLDERS:
            for obj in fetch_s3_objects_metadata(self.bucket_name, prefix=f"{folder}/{uid}/", s3_client=self.s3_client):
                images.append(
                    {
                        "file_name": obj["Key"],
                        "url": self.settings.public_url(obj["Key"]),
                        "size": obj["Size"],
                        "last_modified": obj["LastModified"],
                    }
                )
        return sorted(images, key=lambda image: image["last_modified"], reverse=True)
