# src/assets_api/settings.py
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Self

DEFAULT_MAX_UPLOAD_BYTES = 50 * 1024 * 1024
LOCAL_ENDPOINT_URL = "http://localhost:5000"
VALID_DEPLOYMENT_MODES = ["local-dev", "aws-mock", "aws-prod"]
VALID_LOG_LEVELS = ["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]


class Settings(BaseSettings):
    """
    Single source of truth for all application settings.

    Configuration precedence:
    1. Keyword arguments passed to ``Settings(...)``
    2. Environment variables
    3. .env file (if exists)
    4. Default values in this class (lowest priority)

    Usage:
        from assets_api.settings import get_settings
        settings = get_settings()
        bucket_name = settings.blob_container_name
    """

    # Application Settings
    app_name: str = Field(
        default="assets-api",
        description="Application name"
    )

    # Deployment Mode
    deployment_mode: str = Field(
        default="local-dev",
        description="Deployment mode: local-dev, aws-mock, or aws-prod"
    )

    # AWS Core Settings
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
        description="Endpoint shared by S3 and DynamoDB, e.g. a moto server"
    )

    # Metadata store (DynamoDB)
    metadata_database_name: str = Field(
        default="edushare",
        description="Prefix of the DynamoDB table holding asset metadata"
    )

    metadata_container_name: str = Field(
        default="assets",
        description="Suffix of the DynamoDB table holding asset metadata"
    )

    # Object store (S3)
    blob_container_name: str = Field(
        default="uploads",
        description="S3 bucket holding uploaded file bytes"
    )

    max_upload_bytes: int = Field(
        default=DEFAULT_MAX_UPLOAD_BYTES,
        gt=0,
        description="Largest accepted upload in bytes"
    )

    # HTTP server
    port: int = Field(
        default=8080,
        description="Port the HTTP server listens on"
    )

    cors_allow_origins: List[str] = Field(
        default=["http://localhost:3000"],
        description="Origins allowed by the CORS middleware"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    @property
    def metadata_table_name(self) -> str:
        """DynamoDB table name, e.g. ``edushare-assets``."""
        return f"{self.metadata_database_name}-{self.metadata_container_name}"

    @property
    def is_local(self) -> bool:
        return self.deployment_mode in ["local-dev", "aws-mock"]

    @field_validator("deployment_mode")
    @classmethod
    def validate_deployment_mode(cls, v: str) -> str:
        """Validate deployment mode is one of the allowed values."""
        if v not in VALID_DEPLOYMENT_MODES:
            raise ValueError(f"Invalid deployment_mode: {v}. Must be one of {VALID_DEPLOYMENT_MODES}")
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Upper-case the level and reject names the logging module does not know."""
        level = v.strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {v}. Must be one of {VALID_LOG_LEVELS}")
        return level

    @model_validator(mode="after")
    def fill_mode_defaults(self) -> Self:
        """
        Auto-set endpoint and mock credentials for local modes.

        In ``aws-prod`` both credentials are required; the app refuses to start without them.
        """
        if self.deployment_mode == "local-dev" and self.aws_endpoint_url is None:
            self.aws_endpoint_url = LOCAL_ENDPOINT_URL

        if self.is_local:
            self.aws_access_key_id = self.aws_access_key_id or "mock"
            self.aws_secret_access_key = self.aws_secret_access_key or "mock"
        elif not (self.aws_access_key_id and self.aws_secret_access_key):
            raise ValueError(
                "AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY must be set when deployment_mode is aws-prod"
            )
        return self

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
        validate_assignment=False,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()
