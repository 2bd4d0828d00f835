"""
Streaming event schemas.

Defines event types and payloads for Server-Sent Events progress streams.

Dependencies: pydantic
System role: Streaming protocol schemas
"""

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel


class StreamEventType(str, Enum):
    """Server-to-client event types for progress streaming."""

    PROGRESS = "progress"
    COMPLETE = "complete"
    ERROR = "error"


class StreamEvent(BaseModel):
    """
    Base streaming event model.

    Attributes:
        event: Event type identifier
        data: Event-specific payload
    """

    event: StreamEventType
    data: dict[str, Any]

    def to_sse(self) -> str:
        """Format as an SSE frame: "event: {type}\\ndata: {json}\\n\\n"."""
        return f"event: {self.event.value}\ndata: {json.dumps(self.data)}\n\n"
