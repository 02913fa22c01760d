# src/shop_api/config/settings.py
from decimal import Decimal
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

VALID_DEPLOYMENT_MODES = ["local-dev", "cloud"]


class Settings(BaseSettings):
    """
    Single source of truth for all application settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    Usage:
        from shop_api.config.settings import get_settings
        settings = get_settings()
        bucket_name = settings.s3_bucket_name
    """

    # Application Settings
    app_name: str = Field(
        default="tshirt-shop-api",
        description="Application name"
    )

    # Deployment Mode
    deployment_mode: str = Field(
        default="local-dev",
        description="Deployment mode: local-dev (SQLite documents) or cloud (Firestore documents)"
    )

    # AWS / S3-compatible blob storage
    aws_region: str = Field(
        default="us-east-1",
        alias="AWS_DEFAULT_REGION"
    )

    aws_access_key_id: Optional[str] = Field(
        default=None,
        alias="AWS_ACCESS_KEY_ID"
    )

    aws_secret_access_key: Optional[str] = Field(
        default=None,
        alias="AWS_SECRET_ACCESS_KEY"
    )

    aws_endpoint_url: Optional[str] = Field(
        default=None,
        alias="AWS_ENDPOINT_URL",
        description="Custom S3 endpoint, e.g. a local MinIO or moto server"
    )

    s3_bucket_name: str = Field(
        default="tshirt-shop-images",
        description="Bucket holding uploaded images, design previews and avatars"
    )

    public_base_url: Optional[str] = Field(
        default=None,
        description="Base URL used to build public image URLs (CDN or website endpoint)"
    )

    # Document store
    database_path: str = Field(
        default="shop.db",
        description="SQLite document database used in local-dev mode"
    )

    # Firebase
    firebase_project_id: Optional[str] = Field(
        default=None,
        description="Firebase project ID used to verify ID tokens"
    )

    firebase_credentials_path: Optional[str] = Field(
        default=None,
        description="Service account JSON; Application Default Credentials are used when unset"
    )

    check_revoked: bool = Field(
        default=False,
        description="Also check whether ID tokens were revoked (one extra call per request)"
    )

    # HTTP
    cors_allow_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:19006"],
        description="Origins allowed to call the API"
    )

    # Uploads
    max_image_bytes: int = Field(
        default=10 * 1024 * 1024,
        description="Largest accepted image upload"
    )

    max_images_per_request: int = Field(
        default=10,
        description="Maximum number of files in a multi-image upload"
    )

    # Catalogue
    base_tshirt_price: Decimal = Field(
        default=Decimal("29.99"),
        ge=0,
        description="Unit price of a printed t-shirt"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    @field_validator('deployment_mode', mode='before')
    @classmethod
    def normalize_deployment_mode(cls, v):
        """Normalize deployment mode values for backwards compatibility."""
        if v:
            mode_mapping = {
                "local": "local-dev",
                "dev": "local-dev",
                "firebase": "cloud",
                "prod": "cloud",
            }
            return mode_mapping.get(v, v)
        return v

    @field_validator('deployment_mode')
    @classmethod
    def validate_deployment_mode(cls, v):
        """Validate deployment mode is one of the allowed values."""
        if v not in VALID_DEPLOYMENT_MODES:
            raise ValueError(f"Invalid deployment_mode: {v}. Must be one of {VALID_DEPLOYMENT_MODES}")
        return v

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v):
        return v.upper()

    def public_url(self, object_key: str) -> str:
        """Public URL of an object in the image bucket."""
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{object_key}"
        if self.aws_endpoint_url:
            return f"{self.aws_endpoint_url.rstrip('/')}/{self.s3_bucket_name}/{object_key}"
        return f"https://{self.s3_bucket_name}.s3.{self.aws_region}.amazonaws.com/{object_key}"

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=(".env", ".env.local-dev", ".env.cloud"),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()
