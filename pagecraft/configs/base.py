"""
Service-level configuration.

Settings that belong to the HTTP service rather than to the model or the
chunked pipeline: deployment environment, log verbosity and the browser
origins allowed to call the API. Module configs under pagecraft.configs
declare their own prefixes; these fields are read unprefixed.

Dependencies: pydantic, pydantic_settings
System role: Root of the Settings aggregate
"""

from typing import Literal

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ServiceSettings(BaseSettings):
    """Environment, logging and CORS settings for the API process."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment reported at startup",
    )
    debug: bool = Field(
        default=False,
        description="Run FastAPI in debug mode",
    )
    log_level: LogLevel = Field(
        default="INFO",
        description="Root logger level passed to configure_logging",
    )
    cors_origins: list[str] = Field(
        default=["*"],
        description="Origins allowed to call the conversion endpoints",
    )

    @field_validator("environment", "log_level", mode="before")
    @classmethod
    def normalize_case(cls, value, info: ValidationInfo):
        """Accept any casing from the environment (LOG_LEVEL=debug)."""
        if not isinstance(value, str):
            return value
        value = value.strip()
        return value.upper() if info.field_name == "log_level" else value.lower()
