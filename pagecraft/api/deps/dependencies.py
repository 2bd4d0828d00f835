"""
Dependency injection container.

Factory functions for FastAPI dependencies. The model client and conversion
service are built once from settings and reused across requests.

Dependencies: pagecraft.configs, pagecraft.application, pagecraft.core.model_tasks
System role: DI container for service injection
"""

from fastapi import Depends

from pagecraft.application.services import ConversionService
from pagecraft.configs import get_settings
from pagecraft.core.model_tasks import ModelClient


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self):
        self._model_client = None
        self._conversion_service = None

    @property
    def model_client(self) -> ModelClient:
        """Get cached model client."""
        if self._model_client is None:
            self._model_client = ModelClient(get_settings().model)
        return self._model_client

    @property
    def conversion_service(self) -> ConversionService:
        """Get cached conversion service."""
        if self._conversion_service is None:
            self._conversion_service = ConversionService(
                model_client=self.model_client,
                pipeline_settings=get_settings().pipeline,
            )
        return self._conversion_service

    def clear(self) -> None:
        """Clear all cached instances."""
        self._model_client = None
        self._conversion_service = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_model_client(cache: ServiceCache = Depends(get_service_cache)) -> ModelClient:
    """
    Get the hosted model client.

    Args:
        cache: Service cache (injected via Depends)

    Returns:
        ModelClient: Shared model client
    """
    return cache.model_client


def get_conversion_service(cache: ServiceCache = Depends(get_service_cache)) -> ConversionService:
    """
    Get the conversion service.

    Args:
        cache: Service cache (injected via Depends)

    Returns:
        ConversionService: Shared conversion service
    """
    return cache.conversion_service
