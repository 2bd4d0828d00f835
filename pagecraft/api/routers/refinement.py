"""
Refinement API endpoints.

Routes:
- POST /refinement - Apply user feedback to generated PDF or website content
- POST /refinement/stream - Same, streaming progress using Server-Sent Events (SSE)

Dependencies: pagecraft.application.services.conversion_service
System role: Final-changes HTTP API
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import StreamingResponse

from pagecraft.api.deps import get_conversion_service
from pagecraft.api.routers.router_utils import disconnect_check, sse_response
from pagecraft.application.services import ConversionService
from pagecraft.core.exceptions import PagecraftException
from pagecraft.models.document import RefinementRequest
from pagecraft.models.results import RefinementResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/refinement", tags=["refinement"])


@router.post("", response_model=RefinementResult)
async def refine(
    request: RefinementRequest,
    service: ConversionService = Depends(get_conversion_service),
) -> RefinementResult:
    """
    Apply feedback and return the revised content.

    Raises:
        HTTPException(500): Processing error
    """
    try:
        return await service.refine(request)
    except PagecraftException as e:
        logger.error(f"{__name__}:refine - {e}")
        raise HTTPException(status_code=500, detail=f"Refinement failed: {e.message}")


@router.post("/stream")
async def refine_stream(
    request: RefinementRequest,
    http_request: Request,
    service: ConversionService = Depends(get_conversion_service),
) -> StreamingResponse:
    """Apply feedback, streaming progress and the final result as SSE."""
    logger.info(f"{__name__}:refine_stream - START content_type={request.content_type}")
    events = service.stream_refinement(request, is_cancelled=disconnect_check(http_request))
    return sse_response(events, route="refinement")
