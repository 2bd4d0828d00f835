"""
Model task contract.

A model task owns everything specific to one kind of model call: its prompts,
result schema, sampling settings, per-chunk post-processing, result
combination and deterministic fallback. The conversion service drives every
task through the same chunked pipeline.

Dependencies: langchain_core.prompts, pydantic
System role: Base class for the typeset, structure, website and refine tasks
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from langchain_core.prompts import ChatPromptTemplate
from pydantic import BaseModel

from pagecraft.models.document import Chunk

RequestT = TypeVar("RequestT", bound=BaseModel)
ResultT = TypeVar("ResultT", bound=BaseModel)

CONTINUATION_NOTE = (
    "This is part {part} of a larger document. "
    "Maintain consistent heading hierarchy and structure with the other parts."
)


@dataclass(frozen=True)
class TaskPrompts:
    """Rendered system and user prompts for one chunk."""

    system: str
    user: str


def render_prompts(template: ChatPromptTemplate, **values: Any) -> TaskPrompts:
    """
    Render a two-message (system, human) template.

    Args:
        template: Prompt template with a system and a human message
        **values: Template variables

    Returns:
        TaskPrompts: Rendered prompt text
    """
    system, user = template.format_messages(**values)
    return TaskPrompts(system=str(system.content), user=str(user.content))


def continuation_note(chunk: Chunk) -> str:
    """Note for the model when the chunk is one part of a split document."""
    if chunk.index == 0 and chunk.is_final:
        return ""
    return CONTINUATION_NOTE.format(part=chunk.index + 1)


class ModelTask(ABC, Generic[RequestT, ResultT]):
    """
    One kind of model call run over a chunked document.

    Attributes:
        name: Task identifier used in logs and errors
        result_model: Pydantic schema the model response must validate against
        temperature: Sampling temperature
        output_multiplier: Expected output tokens per input token
        max_output_tokens: Output token ceiling for one call
    """

    name: str
    result_model: type[ResultT]
    temperature: float
    output_multiplier: float
    max_output_tokens: int

    def source_text(self, request: RequestT) -> str:
        """Text the task chunks over."""
        return request.content

    def response_schema(self) -> dict[str, Any]:
        return self.result_model.model_json_schema(by_alias=True, mode="serialization")

    @abstractmethod
    def build_prompts(self, request: RequestT, chunk: Chunk) -> TaskPrompts:
        """Render the prompts for one chunk of the request."""

    def finalize(self, result: ResultT, request: RequestT, chunk: Chunk, partial: bool) -> ResultT:
        """
        Post-process a validated chunk result.

        Args:
            result: Repaired and validated model result
            request: Originating request
            chunk: Chunk the result was produced from
            partial: Whether the repair may have lost content

        Returns:
            ResultT: Result to hand to the combiner
        """
        return result

    @abstractmethod
    def combine(self, results: Sequence[ResultT]) -> ResultT:
        """Merge chunk results in chunk order."""

    @abstractmethod
    def fallback(self, request: RequestT) -> ResultT:
        """Deterministic result used when the model cannot be reached."""
