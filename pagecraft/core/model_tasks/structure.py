"""
Content structure task.

Organises raw text into semantic, hierarchical HTML. Multi-chunk output is
unwrapped per chunk and re-wrapped in one document skeleton.

Dependencies: pagecraft.core.pipeline, pagecraft.models
System role: Model task for content structuring
"""

import logging
from collections.abc import Sequence

from pagecraft.core.model_tasks.base import ModelTask, TaskPrompts, continuation_note, render_prompts
from pagecraft.core.model_tasks.structure_prompt import STRUCTURE_PROMPT, image_context
from pagecraft.core.pipeline import combiner
from pagecraft.core.pipeline.fallbacks import fallback_structure, structure_markup
from pagecraft.models.document import Chunk, StructureRequest
from pagecraft.models.results import StructureResult

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Document"


class StructureTask(ModelTask[StructureRequest, StructureResult]):
    """Semantic HTML structuring of raw content."""

    name = "structure"
    result_model = StructureResult
    temperature = 0.2
    output_multiplier = 1.5
    max_output_tokens = 9999

    def build_prompts(self, request: StructureRequest, chunk: Chunk) -> TaskPrompts:
        is_continuation = chunk.index > 0
        return render_prompts(
            STRUCTURE_PROMPT,
            continuation=continuation_note(chunk),
            continuation_suffix=" (continuation of larger document)" if is_continuation else "",
            content=chunk.text,
            image_context="" if is_continuation else image_context(request.images, request.screenshot),
        )

    def finalize(
        self,
        result: StructureResult,
        request: StructureRequest,
        chunk: Chunk,
        partial: bool,
    ) -> StructureResult:
        if result.structured_content.strip():
            return result
        logger.warning(f"{__name__}:finalize - Empty structuredContent for chunk {chunk.index + 1}, using basic structure")
        return result.model_copy(update={"structured_content": structure_markup(chunk.text)})

    def combine(self, results: Sequence[StructureResult]) -> StructureResult:
        """
        Strip per-chunk wrappers and re-wrap once.

        Title and summary come from the first chunk that provides them.

        Raises:
            NothingToCombineError: If results is empty
        """
        combiner.require_results(results, self.name)
        if len(results) == 1:
            return results[0]

        inner = [combiner.strip_document_wrappers(r.structured_content) for r in results]
        title = next((r.title for r in results if r.title.strip()), DEFAULT_TITLE)
        summary = next((r.summary for r in results if r.summary.strip()), "")

        return StructureResult(
            structured_content=combiner.wrap_document(combiner.concatenate(part for part in inner if part), title),
            title=title,
            summary=summary,
            suggestions=combiner.merge_suggestions((r.suggestions for r in results), len(results)),
        )

    def fallback(self, request: StructureRequest) -> StructureResult:
        return fallback_structure(request)
