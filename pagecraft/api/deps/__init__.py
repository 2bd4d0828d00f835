"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    get_conversion_service,
    get_model_client,
    get_service_cache,
)

__all__ = [
    "get_conversion_service",
    "get_model_client",
    "get_service_cache",
]
