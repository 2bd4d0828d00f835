"""
Typesetting API endpoints.

Routes:
- POST /typesetting - Typeset webpage content into a print-ready document
- POST /typesetting/stream - Same, streaming progress using Server-Sent Events (SSE)

Dependencies: pagecraft.application.services.conversion_service
System role: Web-to-PDF typesetting HTTP API
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import StreamingResponse

from pagecraft.api.deps import get_conversion_service
from pagecraft.api.routers.router_utils import disconnect_check, sse_response
from pagecraft.application.services import ConversionService
from pagecraft.core.exceptions import PagecraftException
from pagecraft.models.document import TypesettingRequest
from pagecraft.models.results import TypesettingResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/typesetting", tags=["typesetting"])


@router.post("", response_model=TypesettingResult)
async def typeset(
    request: TypesettingRequest,
    service: ConversionService = Depends(get_conversion_service),
) -> TypesettingResult:
    """
    Typeset content and return the combined result.

    Args:
        request: Content, document type, images and styling preferences
        service: Injected ConversionService

    Returns:
        TypesettingResult: Formatted HTML, CSS and suggestions

    Raises:
        HTTPException(500): Processing error
    """
    try:
        return await service.typeset(request)
    except PagecraftException as e:
        logger.error(f"{__name__}:typeset - {e}")
        raise HTTPException(status_code=500, detail=f"Typesetting failed: {e.message}")


@router.post("/stream")
async def typeset_stream(
    request: TypesettingRequest,
    http_request: Request,
    service: ConversionService = Depends(get_conversion_service),
) -> StreamingResponse:
    """Typeset content, streaming progress and the final result as SSE."""
    logger.info(f"{__name__}:typeset_stream - START document_type={request.document_type}")
    events = service.stream_typesetting(request, is_cancelled=disconnect_check(http_request))
    return sse_response(events, route="typesetting")
