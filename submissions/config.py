"""
Configuration Management

Pydantic-settings based configuration for the submission ingestion pipeline.
All settings can be overridden via environment variables.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables are prefixed with SUBMISSIONS_ and are case-insensitive.
    Example: SUBMISSIONS_S3_BUCKET_NAME=my-bucket
    """

    model_config = SettingsConfigDict(
        env_prefix="SUBMISSIONS_",
        env_file=[".env.local", ".env"],  # Try .env.local first
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # S3 Configuration
    s3_bucket_name: str = Field(
        default="assignment-submissions",
        description="S3 bucket receiving submission archives",
    )
    s3_submissions_prefix: str = Field(
        default="",
        description="Prefix prepended to derived submission keys",
    )
    s3_presign_expiry_seconds: int = Field(
        default=0,
        ge=0,
        description="Lifetime of the presigned link in success emails (0 = send the s3:// URI)",
    )
    s3_endpoint_url: str | None = Field(
        default=None,
        description="S3 endpoint URL (for local development)",
    )

    # DynamoDB Configuration
    dynamodb_table_name: str = Field(
        default="SubmissionOutcomes",
        description="DynamoDB table holding one outcome record per invocation",
    )
    dynamodb_endpoint_url: str | None = Field(
        default=None,
        description="DynamoDB endpoint URL (for local development)",
    )

    # SES Configuration
    ses_from_address: str = Field(
        default="noreply@submissions.example.com",
        description="From address for outbound notification emails",
    )
    ses_from_name: str | None = Field(
        default=None,
        description="Display name for outbound emails",
    )
    ses_configuration_set: str | None = Field(
        default=None,
        description="SES configuration set for tracking",
    )
    ses_endpoint_url: str | None = Field(
        default=None,
        description="SES endpoint URL (for local development)",
    )

    # Remote fetch Configuration
    expected_content_type: str = Field(
        default="application/zip",
        description="Media type every submission must declare",
    )
    http_connect_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Connect timeout in seconds for the submission download",
    )
    http_read_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Read timeout in seconds for the submission download",
    )

    # AWS Configuration
    aws_region: str = Field(
        default="us-east-1",
        description="AWS region",
    )

    # Application Configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    @property
    def http_timeout(self) -> tuple[float, float]:
        """(connect, read) timeout tuple passed to requests."""
        return (self.http_connect_timeout, self.http_read_timeout)

    @property
    def s3_config(self) -> dict:
        """S3 client configuration."""
        config = {"region_name": self.aws_region}
        if self.s3_endpoint_url:
            config["endpoint_url"] = self.s3_endpoint_url
        return config

    @property
    def ses_config(self) -> dict:
        """SES client configuration."""
        config = {"region_name": self.aws_region}
        if self.ses_endpoint_url:
            config["endpoint_url"] = self.ses_endpoint_url
        return config

    @property
    def dynamodb_config(self) -> dict:
        """DynamoDB client configuration."""
        config = {"region_name": self.aws_region}
        if self.dynamodb_endpoint_url:
            config["endpoint_url"] = self.dynamodb_endpoint_url
        return config


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache to ensure settings are loaded only once.
    Call get_settings.cache_clear() in tests after changing the environment.
    """
    return Settings()
