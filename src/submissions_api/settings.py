# src/submissions_api/settings.py
import json
import logging
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from typing_extensions import Annotated, Self

LOCAL_MODES = ("local-dev", "aws-mock")
VALID_MODES = ("local-dev", "aws-mock", "aws-prod")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Settings(BaseSettings):
    """
    Single source of truth for all application settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    Usage:
        from submissions_api.settings import get_settings
        settings = get_settings()
        bucket_name = settings.s3_bucket_name
    """

    # Application Settings
    app_name: str = Field(
        default="submissions-api",
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
        alias="AWS_ENDPOINT_URL"
    )

    # S3 Configuration
    s3_bucket_name: str = Field(
        default="user-submissions",
        description="S3 bucket holding one JSON object per submission"
    )

    # HTTP Server
    host: str = Field(
        default="0.0.0.0",
        description="Interface uvicorn binds to"
    )

    port: int = Field(
        default=3000,
        description="Port uvicorn listens on"
    )

    cors_allow_origins: Annotated[List[str], NoDecode] = Field(
        default=["*"],
        description="Origins allowed by the CORS middleware, comma separated or a JSON list"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    @field_validator("deployment_mode", mode="before")
    @classmethod
    def normalize_deployment_mode(cls, v):
        """Normalize deployment mode values for backwards compatibility."""
        if v:
            mode_mapping = {
                "local-mock": "local-dev",
                "cloud": "aws-prod",
            }
            return mode_mapping.get(v, v)
        return v

    @field_validator("deployment_mode")
    @classmethod
    def validate_deployment_mode(cls, v):
        """Validate deployment mode is one of the allowed values."""
        if v not in VALID_MODES:
            raise ValueError(f"Invalid deployment_mode: {v}. Must be one of {list(VALID_MODES)}")
        return v

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def split_cors_allow_origins(cls, v):
        """Accept `*`, `https://a.example,https://b.example` or a JSON list."""
        if isinstance(v, str):
            v = v.strip()
            if v.startswith("["):
                return json.loads(v)
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v):
        return v.upper()

    @model_validator(mode="after")
    def apply_mode_defaults(self) -> Self:
        """Fill in the endpoint and mock credentials for local modes if not provided."""
        if self.deployment_mode == "aws-mock" and self.aws_endpoint_url is None:
            self.aws_endpoint_url = "http://localhost:5000"
        if self.deployment_mode in LOCAL_MODES:
            # In production these stay None so the IAM execution role handles auth
            if self.aws_access_key_id is None:
                self.aws_access_key_id = "mock"
            if self.aws_secret_access_key is None:
                self.aws_secret_access_key = "mock"
        return self

    @property
    def storage_enabled(self) -> bool:
        """Whether this mode talks to S3 at all. ``local-dev`` runs without storage."""
        return self.deployment_mode != "local-dev"

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


def configure_logging(settings: Settings) -> None:
    """Configure root logging once from the ``LOG_LEVEL`` setting."""
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
