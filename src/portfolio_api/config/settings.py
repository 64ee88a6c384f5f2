# src/portfolio_api/config/settings.py
from functools import lru_cache
from typing import List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MEDIA_BACKENDS = ("local", "s3")
SECRET_FIELDS = ("admin_password", "email_pass", "aws_secret_access_key")


class Settings(BaseSettings):
    """
    Single source of truth for all application settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    Read once at process start and handed to ``create_app``; components never
    look up the environment themselves.

    Usage:
        from portfolio_api.config.settings import get_settings
        settings = get_settings()
        uploads_dir = settings.uploads_dir
    """

    # Application Settings
    app_name: str = Field(
        default="portfolio-api",
        description="Application name"
    )

    host: str = Field(default="0.0.0.0", description="Listen address")

    port: int = Field(default=5000, description="Listen port")

    # Document store
    mongo_uri: str = Field(
        default="mongodb://localhost:27017/portfolioDB",
        description="MongoDB connection string"
    )

    mongo_db_name: Optional[str] = Field(
        default=None,
        description="Database name (taken from the URI path when not set)"
    )

    # Admin gate
    admin_password: Optional[str] = Field(
        default=None,
        description="Shared secret checked by POST /admin/verify"
    )

    # Mail relay
    email_user: Optional[str] = Field(
        default=None,
        description="SMTP account; also the sender and recipient of contact mail"
    )

    email_pass: Optional[str] = Field(default=None, description="SMTP account password")

    smtp_host: str = Field(default="smtp.gmail.com", description="SMTP server host")

    smtp_port: int = Field(default=587, description="SMTP server port")

    smtp_start_tls: bool = Field(default=True, description="Upgrade the SMTP connection with STARTTLS")

    # Media storage
    media_backend: str = Field(
        default="local",
        description="Media backend: local or s3"
    )

    uploads_dir: str = Field(
        default="uploads",
        description="Directory for uploaded images (local backend)"
    )

    static_prefix: str = Field(
        default="/uploads",
        description="URL path uploaded images are served from"
    )

    public_base_url: Optional[str] = Field(
        default=None,
        description="Origin used for image URLs instead of the request origin"
    )

    # S3 media backend
    s3_bucket_name: Optional[str] = Field(
        default=None,
        description="S3 bucket for uploaded images (s3 backend)"
    )

    aws_region: str = Field(
        default="us-east-1",
        validation_alias=AliasChoices("aws_region", "AWS_DEFAULT_REGION")
    )

    aws_endpoint_url: Optional[str] = Field(default=None)

    aws_access_key_id: Optional[str] = Field(default=None)

    aws_secret_access_key: Optional[str] = Field(default=None)

    # HTTP
    cors_allow_origins: List[str] = Field(
        default=["*"],
        description="Origins allowed by the CORS middleware"
    )

    # Behaviour toggles
    list_errors_as_empty: bool = Field(
        default=True,
        description="Answer list requests with [] when the database fails"
    )

    cleanup_orphaned_media: bool = Field(
        default=True,
        description="Remove stored images on resource delete and image replacement"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    @field_validator('media_backend', mode='before')
    @classmethod
    def validate_media_backend(cls, v):
        """Normalize and validate the media backend name."""
        v = str(v).strip().lower()
        if v not in MEDIA_BACKENDS:
            raise ValueError(f"Invalid media_backend: {v}. Must be one of {list(MEDIA_BACKENDS)}")
        return v

    @field_validator('static_prefix')
    @classmethod
    def normalize_static_prefix(cls, v: str) -> str:
        """Always a leading slash, never a trailing one."""
        return "/" + v.strip("/")

    @field_validator('public_base_url')
    @classmethod
    def strip_trailing_slash(cls, v: Optional[str]) -> Optional[str]:
        return v.rstrip("/") if v else v

    @field_validator('log_level')
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return v.upper()

    def masked_dict(self) -> dict:
        """Settings as a dict with secrets replaced, for display."""
        values = self.model_dump()
        for key in SECRET_FIELDS:
            if values.get(key):
                values[key] = "********"
        return values

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
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
