"""
Chunked pipeline configuration settings.

Chunk sizing, retry policy and fallback policy for model tasks.

Dependencies: pydantic_settings
System role: Pipeline tuning knobs
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PipelineSettings(BaseSettings):
    """Chunking and failure-handling configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PIPELINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    chunk_token_threshold: int = Field(
        default=7000,
        gt=0,
        description="Maximum estimated tokens per chunk",
    )
    chars_per_token: int = Field(
        default=4,
        gt=0,
        description="Characters per token used by the token estimator",
    )
    hard_split_chars_per_token: float = Field(
        default=3.5,
        gt=0,
        description="Conservative characters per token for hard character splits",
    )
    max_retries_per_chunk: int = Field(
        default=0,
        ge=0,
        description="Extra attempts for a failed chunk before it is skipped",
    )
    retry_backoff_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Linear backoff between chunk retries",
    )
    fallback_on_total_failure: bool = Field(
        default=True,
        description="Substitute the fallback result when every chunk fails",
    )
