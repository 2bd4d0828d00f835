"""
API routes module.

FastAPI routers for all HTTP endpoints.
"""

from fastapi import APIRouter

from .routers import (
    content_structure_router,
    health_router,
    refinement_router,
    typesetting_router,
    website_router,
)

api_router = APIRouter()

# Include all routers
api_router.include_router(health_router)
api_router.include_router(typesetting_router)
api_router.include_router(content_structure_router)
api_router.include_router(website_router)
api_router.include_router(refinement_router)

__all__ = ["api_router"]
