"""
Content structure API endpoints.

Routes:
- POST /content-structure - Organise raw content into semantic HTML
- POST /content-structure/stream - Same, streaming progress using Server-Sent Events (SSE)

Dependencies: pagecraft.application.services.conversion_service
System role: Content structuring HTTP API
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import StreamingResponse

from pagecraft.api.deps import get_conversion_service
from pagecraft.api.routers.router_utils import disconnect_check, sse_response
from pagecraft.application.services import ConversionService
from pagecraft.core.exceptions import PagecraftException
from pagecraft.models.document import StructureRequest
from pagecraft.models.results import StructureResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/content-structure", tags=["content-structure"])


@router.post("", response_model=StructureResult)
async def structure_content(
    request: StructureRequest,
    service: ConversionService = Depends(get_conversion_service),
) -> StructureResult:
    """
    Structure content and return the combined document.

    Raises:
        HTTPException(500): Processing error
    """
    try:
        return await service.structure(request)
    except PagecraftException as e:
        logger.error(f"{__name__}:structure_content - {e}")
        raise HTTPException(status_code=500, detail=f"Content structuring failed: {e.message}")


@router.post("/stream")
async def structure_content_stream(
    request: StructureRequest,
    http_request: Request,
    service: ConversionService = Depends(get_conversion_service),
) -> StreamingResponse:
    """Structure content, streaming progress and the final result as SSE."""
    events = service.stream_structure(request, is_cancelled=disconnect_check(http_request))
    return sse_response(events, route="content-structure")
