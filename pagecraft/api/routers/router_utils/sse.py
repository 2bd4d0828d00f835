"""
Server-Sent Events helpers.

Frames pipeline stream events as SSE and wraps them in a StreamingResponse.
Failures are always reported in-stream; once streaming starts the HTTP
status is 200.

Dependencies: fastapi, pagecraft.models.streaming
System role: SSE transport for progress streams
"""

import json
import logging
from collections.abc import AsyncGenerator, AsyncIterator

from fastapi import Request
from fastapi.responses import StreamingResponse

from pagecraft.core.pipeline.dispatcher import CancellationCheck
from pagecraft.models.streaming import StreamEvent, StreamEventType

logger = logging.getLogger(__name__)

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # Disable nginx buffering
}


def disconnect_check(request: Request) -> CancellationCheck:
    """Cancellation predicate that reports a dropped client connection."""

    async def is_cancelled() -> bool:
        return await request.is_disconnected()

    return is_cancelled


def sse_response(events: AsyncIterator[StreamEvent], route: str) -> StreamingResponse:
    """
    Stream pipeline events to the client as SSE.

    SSE Format:
        event: progress
        data: {"step": "...", "percentage": 10, "chunkIndex": 1, "totalChunks": 3}

        event: complete
        data: {"step": "Processing complete", "percentage": 100, "result": {...}}

        event: error
        data: {"step": "Error occurred during processing", "percentage": 100, "error": "..."}

    Args:
        events: Stream events ending in one terminal event
        route: Route name for logging

    Returns:
        StreamingResponse: text/event-stream response
    """

    async def event_generator() -> AsyncGenerator[str, None]:
        try:
            async for event in events:
                yield event.to_sse()
            logger.info(f"{__name__}:sse_response - Stream completed for {route}")
        except Exception as e:
            logger.error(f"{__name__}:sse_response - {type(e).__name__}: {e}")
            error_data = json.dumps({
                "step": "Error occurred during processing",
                "percentage": 100,
                "error": str(e),
            })
            yield f"event: {StreamEventType.ERROR.value}\ndata: {error_data}\n\n"

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
