"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pagecraft.configs.base import ServiceSettings
from pagecraft.configs.model import ModelSettings
from pagecraft.configs.pipeline import PipelineSettings


class Settings(ServiceSettings):
    """Unified application settings aggregating all config modules."""

    model: ModelSettings = ModelSettings()
    pipeline: PipelineSettings = PipelineSettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from pagecraft.configs import get_settings
        settings = get_settings()
    """
    return Settings()
