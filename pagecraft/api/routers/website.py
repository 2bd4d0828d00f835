"""
Website generation API endpoints.

Routes:
- POST /website-generation - Generate a website from extracted document content
- POST /website-generation/stream - Same, streaming progress using Server-Sent Events (SSE)

Dependencies: pagecraft.application.services.conversion_service
System role: PDF-to-website HTTP API
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import StreamingResponse

from pagecraft.api.deps import get_conversion_service
from pagecraft.api.routers.router_utils import disconnect_check, sse_response
from pagecraft.application.services import ConversionService
from pagecraft.core.exceptions import PagecraftException
from pagecraft.models.document import WebsiteRequest
from pagecraft.models.results import WebsiteResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/website-generation", tags=["website-generation"])


@router.post("", response_model=WebsiteResult)
async def generate_website(
    request: WebsiteRequest,
    service: ConversionService = Depends(get_conversion_service),
) -> WebsiteResult:
    """
    Generate website HTML and CSS.

    Args:
        request: Content, website type, images and design preferences
        service: Injected ConversionService

    Returns:
        WebsiteResult: Website markup, stylesheet and suggestions

    Raises:
        HTTPException(500): Processing error
    """
    try:
        return await service.generate_website(request)
    except PagecraftException as e:
        logger.error(f"{__name__}:generate_website - {e}")
        raise HTTPException(status_code=500, detail=f"Website generation failed: {e.message}")


@router.post("/stream")
async def generate_website_stream(
    request: WebsiteRequest,
    http_request: Request,
    service: ConversionService = Depends(get_conversion_service),
) -> StreamingResponse:
    logger.info(f"{__name__}:generate_website_stream - START website_type={request.website_type}")
    events = service.stream_website(request, is_cancelled=disconnect_check(http_request))
    return sse_response(events, route="website-generation")
