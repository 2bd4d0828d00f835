"""API routers."""

from .content_structure import router as content_structure_router
from .health import router as health_router
from .refinement import router as refinement_router
from .typesetting import router as typesetting_router
from .website import router as website_router

__all__ = [
    "content_structure_router",
    "health_router",
    "refinement_router",
    "typesetting_router",
    "website_router",
]
