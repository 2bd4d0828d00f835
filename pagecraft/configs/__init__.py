"""
Configuration management module.

Provides centralized, type-safe configuration using Pydantic Settings.
All config modules support environment variable mapping with validation.
"""

from pagecraft.configs.model import ModelSettings
from pagecraft.configs.pipeline import PipelineSettings
from pagecraft.configs.settings import Settings, get_settings

__all__ = ["ModelSettings", "PipelineSettings", "Settings", "get_settings"]
