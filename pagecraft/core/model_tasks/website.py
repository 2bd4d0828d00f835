"""
Website generation task.

Designs a website from extracted document content. Image placeholders the
model emits are replaced with real <img> tags for the supplied images.

Dependencies: pagecraft.core.pipeline, pagecraft.models
System role: Model task for PDF-to-website generation
"""

from collections.abc import Sequence

from pagecraft.core.model_tasks.base import ModelTask, TaskPrompts, continuation_note, render_prompts
from pagecraft.core.model_tasks.website_prompt import (
    WEBSITE_PROMPT,
    image_note,
    special_requirements,
    styling_preferences,
)
from pagecraft.core.pipeline import combiner
from pagecraft.core.pipeline.fallbacks import fallback_website
from pagecraft.models.document import Chunk, ImageAttachment, WebsiteRequest
from pagecraft.models.results import WebsiteResult


def replace_image_placeholders(html: str, images: list[ImageAttachment]) -> str:
    """
    Substitute [IMAGE_n] placeholders with <img> tags.

    Args:
        html: Generated markup
        images: Supplied images, where images[n-1] backs [IMAGE_n]

    Returns:
        str: Markup with every known placeholder replaced
    """
    for i, image in enumerate(images, start=1):
        alt = image.caption or f"Image {i}"
        html = html.replace(f"[IMAGE_{i}]", f'<img src="{image.as_src()}" alt="{alt}" class="content-image">')
    return html


class WebsiteTask(ModelTask[WebsiteRequest, WebsiteResult]):
    """Creative website generation from document content."""

    name = "generate-website"
    result_model = WebsiteResult
    temperature = 0.3
    output_multiplier = 3.0
    max_output_tokens = 12000

    def build_prompts(self, request: WebsiteRequest, chunk: Chunk) -> TaskPrompts:
        return render_prompts(
            WEBSITE_PROMPT,
            continuation=continuation_note(chunk),
            content=chunk.text,
            website_type=request.website_type,
            styling_preferences=styling_preferences(request.styling),
            special_requirements=special_requirements(request.special_requirements),
            image_note=image_note(len(request.images)),
        )

    def finalize(self, result: WebsiteResult, request: WebsiteRequest, chunk: Chunk, partial: bool) -> WebsiteResult:
        if not request.images:
            return result
        return result.model_copy(update={"html": replace_image_placeholders(result.html, request.images)})

    def combine(self, results: Sequence[WebsiteResult]) -> WebsiteResult:
        combiner.require_results(results, self.name)
        if len(results) == 1:
            return results[0]
        return WebsiteResult(
            html=combiner.concatenate(r.html for r in results),
            css=results[0].css,
            suggestions=combiner.merge_suggestions((r.suggestions for r in results), len(results)),
        )

    def fallback(self, request: WebsiteRequest) -> WebsiteResult:
        return fallback_website(request)
