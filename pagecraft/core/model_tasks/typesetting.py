"""
Typesetting task.

Turns webpage content into a print-ready HTML document with CSS and
improvement suggestions.

Dependencies: pagecraft.core.pipeline, pagecraft.models
System role: Model task for web-to-PDF typesetting
"""

import logging
from collections.abc import Sequence

from pagecraft.core.model_tasks.base import ModelTask, TaskPrompts, continuation_note, render_prompts
from pagecraft.core.model_tasks.typesetting_prompt import (
    DOCUMENT_TYPE_INSTRUCTIONS,
    TYPESETTING_PROMPT,
    image_instructions,
)
from pagecraft.core.pipeline import combiner
from pagecraft.core.pipeline.fallbacks import basic_css, fallback_typesetting
from pagecraft.models.document import Chunk, TypesettingRequest
from pagecraft.models.results import Styling, TypesettingResult

logger = logging.getLogger(__name__)

PARTIAL_LAYOUT = "Basic layout applied due to parsing error"
PARTIAL_SUGGESTION = "Response parsing failed, using basic formatting"


class TypesettingTask(ModelTask[TypesettingRequest, TypesettingResult]):
    """Print typesetting of webpage content."""

    name = "typeset"
    result_model = TypesettingResult
    temperature = 0.1
    output_multiplier = 2.0
    max_output_tokens = 9999

    def build_prompts(self, request: TypesettingRequest, chunk: Chunk) -> TaskPrompts:
        return render_prompts(
            TYPESETTING_PROMPT,
            continuation=continuation_note(chunk),
            document_type=request.document_type,
            output_format=request.output_format,
            content=chunk.text,
            type_instructions=DOCUMENT_TYPE_INSTRUCTIONS.get(request.document_type, ""),
            # Images and screenshot are placed once, with the opening chunk
            image_instructions=image_instructions(request.images, request.screenshot) if chunk.index == 0 else "",
        )

    def finalize(
        self,
        result: TypesettingResult,
        request: TypesettingRequest,
        chunk: Chunk,
        partial: bool,
    ) -> TypesettingResult:
        """Replace the styling of a partially recovered response with the basic stylesheet."""
        if not partial:
            return result
        logger.warning(
            f"{__name__}:finalize - Partial response for chunk {chunk.index + 1}, applying basic CSS"
        )
        return result.model_copy(
            update={
                "styling": Styling(css=basic_css(request), layout=PARTIAL_LAYOUT),
                "suggestions": [*result.suggestions, PARTIAL_SUGGESTION],
            }
        )

    def combine(self, results: Sequence[TypesettingResult]) -> TypesettingResult:
        """
        Concatenate content and keep the first chunk's styling.

        Args:
            results: Chunk results in order

        Returns:
            TypesettingResult: Combined document

        Raises:
            NothingToCombineError: If results is empty
        """
        combiner.require_results(results, self.name)
        if len(results) == 1:
            return results[0]

        count = len(results)
        primary = results[0].styling
        return TypesettingResult(
            formatted_content=combiner.concatenate(r.formatted_content for r in results),
            styling=Styling(css=primary.css, layout=combiner.annotate_layout(primary.layout, count)),
            suggestions=combiner.merge_suggestions((r.suggestions for r in results), count),
        )

    def fallback(self, request: TypesettingRequest) -> TypesettingResult:
        return fallback_typesetting(request)
