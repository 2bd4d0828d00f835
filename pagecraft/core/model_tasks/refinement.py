"""
Refinement task.

Applies free-form user feedback to previously generated PDF or website
content. The stylesheet travels with the first chunk only, so the first
chunk's CSS decision is authoritative.

Dependencies: pagecraft.core.pipeline, pagecraft.models
System role: Model task for applying final changes
"""

from collections.abc import Sequence

from pagecraft.core.model_tasks.base import ModelTask, TaskPrompts, continuation_note, render_prompts
from pagecraft.core.model_tasks.refinement_prompt import REFINEMENT_PROMPT, TARGET_DESCRIPTIONS, css_block
from pagecraft.core.pipeline import combiner
from pagecraft.core.pipeline.fallbacks import fallback_refinement
from pagecraft.models.document import Chunk, RefinementRequest
from pagecraft.models.results import RefinementResult


class RefinementTask(ModelTask[RefinementRequest, RefinementResult]):
    """User-feedback refinement of generated content."""

    name = "refine"
    result_model = RefinementResult
    temperature = 0.2
    output_multiplier = 1.5
    max_output_tokens = 9999

    def source_text(self, request: RefinementRequest) -> str:
        return request.current_content

    def build_prompts(self, request: RefinementRequest, chunk: Chunk) -> TaskPrompts:
        return render_prompts(
            REFINEMENT_PROMPT,
            target_description=TARGET_DESCRIPTIONS[request.content_type],
            continuation=continuation_note(chunk),
            user_feedback=request.user_feedback,
            content=chunk.text,
            css_block=css_block(request.current_css) if chunk.index == 0 else "",
        )

    def finalize(
        self,
        result: RefinementResult,
        request: RefinementRequest,
        chunk: Chunk,
        partial: bool,
    ) -> RefinementResult:
        # Empty CSS means "unchanged"; keep the caller's stylesheet
        if chunk.index == 0 and not result.refined_css.strip() and request.current_css:
            return result.model_copy(update={"refined_css": request.current_css})
        return result

    def combine(self, results: Sequence[RefinementResult]) -> RefinementResult:
        """
        Concatenate refined content and merge change lists.

        Raises:
            NothingToCombineError: If results is empty
        """
        combiner.require_results(results, self.name)
        if len(results) == 1:
            return results[0]

        explanations = combiner.merge_unique([r.explanation] for r in results if r.explanation.strip())
        return RefinementResult(
            refined_content=combiner.concatenate(r.refined_content for r in results),
            refined_css=results[0].refined_css,
            changes=combiner.merge_unique(r.changes for r in results),
            suggestions=combiner.merge_suggestions((r.suggestions for r in results), len(results)),
            explanation=" ".join(explanations),
        )

    def fallback(self, request: RefinementRequest) -> RefinementResult:
        return fallback_refinement(request)
