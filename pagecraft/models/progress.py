"""
Pipeline progress event models.

Immutable records streamed from a pipeline run to its caller: progress
updates followed by exactly one terminal event.

Dependencies: pydantic, pagecraft.models.streaming
System role: Progress Relay payload schemas
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pagecraft.models.streaming import StreamEvent, StreamEventType


class ProgressEvent(BaseModel):
    """
    Progress update for one pipeline run.

    Attributes:
        step: Human-readable step description
        percentage: Completion percentage (0-100)
        chunk_index: One-based index of the current chunk
        total_chunks: Number of chunks in the run
    """

    model_config = ConfigDict(frozen=True)

    step: str
    percentage: int = Field(ge=0, le=100)
    chunk_index: int = Field(default=1, ge=0)
    total_chunks: int = Field(default=1, ge=0)

    def to_stream_event(self) -> StreamEvent:
        return StreamEvent(
            event=StreamEventType.PROGRESS,
            data={
                "type": StreamEventType.PROGRESS.value,
                "step": self.step,
                "percentage": self.percentage,
                "chunkIndex": self.chunk_index,
                "totalChunks": self.total_chunks,
            },
        )


class TerminalKind(str, Enum):
    """Discriminant for the final event of a run."""

    COMPLETE = "complete"
    ERROR = "error"


class TerminalEvent(BaseModel):
    """
    Final event of a pipeline run.

    Carries either the combined result or an error message, never both.

    Attributes:
        kind: complete or error
        step: Human-readable step description
        percentage: Always 100
        result: Combined result for complete events
        error: Error message for error events
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: TerminalKind
    step: str
    percentage: int = Field(default=100, ge=100, le=100)
    result: Any = None
    error: str | None = None

    @model_validator(mode="after")
    def check_payload(self) -> "TerminalEvent":
        if self.kind == TerminalKind.COMPLETE and (self.result is None or self.error is not None):
            raise ValueError("complete events carry a result and no error")
        if self.kind == TerminalKind.ERROR and (self.error is None or self.result is not None):
            raise ValueError("error events carry an error and no result")
        return self

    @classmethod
    def complete(cls, result: Any, step: str = "Processing complete") -> "TerminalEvent":
        return cls(kind=TerminalKind.COMPLETE, step=step, result=result)

    @classmethod
    def failure(cls, error: str, step: str = "Error occurred during processing") -> "TerminalEvent":
        return cls(kind=TerminalKind.ERROR, step=step, error=error)

    @property
    def is_complete(self) -> bool:
        return self.kind == TerminalKind.COMPLETE

    def to_stream_event(self) -> StreamEvent:
        """Convert to a transport-neutral stream event."""
        if self.is_complete:
            result = self.result
            if isinstance(result, BaseModel):
                result = result.model_dump(by_alias=True)
            return StreamEvent(
                event=StreamEventType.COMPLETE,
                data={"type": self.kind.value, "step": self.step, "percentage": self.percentage, "result": result},
            )
        return StreamEvent(
            event=StreamEventType.ERROR,
            data={"type": self.kind.value, "step": self.step, "percentage": self.percentage, "error": self.error},
        )


PipelineEvent = ProgressEvent | TerminalEvent
