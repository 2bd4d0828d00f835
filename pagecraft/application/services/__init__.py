"""
Application services.

Exports: ConversionService
"""

from pagecraft.application.services.conversion_service import ConversionService

__all__ = ["ConversionService"]
