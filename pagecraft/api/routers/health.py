"""
Health check API endpoints.

Routes: GET /health, GET /health/model

Dependencies: pagecraft.core.model_tasks
System role: Health check HTTP API
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from pagecraft.api.deps import get_model_client
from pagecraft.core.model_tasks import ModelClient


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/model", response_model=HealthResponse)
async def health_check_model(model_client: ModelClient = Depends(get_model_client)) -> HealthResponse:
    """
    Model configuration check.

    Reports whether credentials are present. Without them every task returns
    its deterministic fallback result.
    """
    if model_client.is_configured:
        return HealthResponse(status="healthy", message=f"Model configured: {model_client.model_id}")
    return HealthResponse(status="degraded", message="Model credentials missing, running in fallback mode")
