"""
Shared configuration management for the document submission client.
"""

from typing import Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared.errors import ConfigError


DEFAULT_API_URL = "https://ismp.crpt.ru/api/v3/lk/documents/create"


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="SUBMISSION_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        if value.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {value}")
        return value.lower()


class SubmissionConfig(BaseConfig):
    """Settings for the rate-limited submission client."""

    service_name: str = "submission"

    # Remote endpoint
    api_url: str = Field(default=DEFAULT_API_URL)
    http_timeout_seconds: float = Field(default=10.0, gt=0)

    # Quota: at most request_limit calls per period_seconds
    request_limit: int = Field(default=5, ge=1)
    period_seconds: float = Field(default=1.0, gt=0)


def get_config(**overrides) -> SubmissionConfig:
    """Load submission settings from the environment, applying overrides.

    Raises ConfigError when a value is missing or out of range.
    """
    values = {key: value for key, value in overrides.items() if value is not None}
    try:
        return SubmissionConfig(**values)
    except ValidationError as e:
        raise ConfigError(
            "Invalid submission settings",
            details={"errors": [
                {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
                for err in e.errors()
            ]}
        ) from e
