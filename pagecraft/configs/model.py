"""
Language model configuration settings.

Credentials, model selection and per-call limits for the hosted model.

Dependencies: pydantic_settings
System role: Model client configuration
"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ModelSettings(BaseSettings):
    """Hosted language model configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MODEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        protected_namespaces=(),
        populate_by_name=True,
    )

    google_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("MODEL_GOOGLE_API_KEY", "GOOGLE_API_KEY"),
        description="API key for the Google Generative AI endpoint",
    )
    model_id: str = Field(
        default="gemini-2.5-flash",
        validation_alias=AliasChoices("MODEL_ID", "MODEL_MODEL_ID"),
        description="Model identifier used for every task",
    )
    request_timeout_seconds: float = Field(
        default=120.0,
        gt=0,
        description="Upper bound for a single model call",
    )
    context_window_tokens: int = Field(
        default=128000,
        gt=0,
        description="Context window used when budgeting output tokens",
    )
    safety_margin_tokens: int = Field(
        default=500,
        ge=0,
        description="Tokens kept free in the context window",
    )
    min_output_tokens: int = Field(
        default=1024,
        gt=0,
        description="Lower bound for the output token budget",
    )

    @property
    def is_configured(self) -> bool:
        """True when credentials and a model id are both present."""
        return bool(self.google_api_key and self.google_api_key.strip() and self.model_id)
