"""
Conversion service for model-backed document transformations.

Runs a model task over a document through the chunked pipeline:
split → per-chunk model call → response repair → combine, with progress
relayed to the caller. Degrades to the task's deterministic fallback when
the model is not configured, and (by default) when every chunk failed.

Dependencies: pagecraft.core.pipeline, pagecraft.core.model_tasks
System role: Application service behind the conversion endpoints
"""

import logging
import time
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import aclosing
from functools import partial
from typing import Any

from pagecraft.configs.pipeline import PipelineSettings
from pagecraft.core.exceptions import NothingToCombineError, PagecraftException
from pagecraft.core.model_tasks import (
    ModelClient,
    ModelRequest,
    ModelTask,
    RefinementTask,
    StructureTask,
    TypesettingTask,
    WebsiteTask,
)
from pagecraft.core.pipeline import (
    ChunkSplitter,
    ChunkedTaskDispatcher,
    ProgressRelay,
    ResponseRepairer,
    compute_output_budget,
)
from pagecraft.core.pipeline.dispatcher import CancellationCheck
from pagecraft.models.document import (
    Chunk,
    RefinementRequest,
    StructureRequest,
    TypesettingRequest,
    WebsiteRequest,
)
from pagecraft.models.progress import PipelineEvent, ProgressEvent, TerminalEvent
from pagecraft.models.results import RefinementResult, StructureResult, TypesettingResult, WebsiteResult
from pagecraft.models.streaming import StreamEvent

logger = logging.getLogger(__name__)

FALLBACK_STEP = "Model unavailable, applying fallback formatting..."


class ConversionService:
    """
    Model task orchestration for the conversion endpoints.

    Each public task has a streaming form (async iterator of StreamEvent) and
    a collecting form (awaits the final result).
    """

    def __init__(
        self,
        model_client: ModelClient,
        pipeline_settings: PipelineSettings,
        repairer: ResponseRepairer | None = None,
    ) -> None:
        """
        Initialize conversion service.

        Args:
            model_client: Client for the hosted model
            pipeline_settings: Chunking, retry and fallback policy
            repairer: Response repairer (default instance if omitted)
        """
        self.model_client = model_client
        self.pipeline_settings = pipeline_settings
        self.repairer = repairer or ResponseRepairer()
        self.splitter = ChunkSplitter(
            max_tokens=pipeline_settings.chunk_token_threshold,
            chars_per_token=pipeline_settings.chars_per_token,
            hard_split_chars_per_token=pipeline_settings.hard_split_chars_per_token,
        )
        self.dispatcher = ChunkedTaskDispatcher(
            self.splitter,
            max_retries=pipeline_settings.max_retries_per_chunk,
            retry_backoff_seconds=pipeline_settings.retry_backoff_seconds,
        )

        self.typesetting_task = TypesettingTask()
        self.structure_task = StructureTask()
        self.website_task = WebsiteTask()
        self.refinement_task = RefinementTask()

    # Streaming

    def stream_typesetting(
        self, request: TypesettingRequest, is_cancelled: CancellationCheck | None = None
    ) -> AsyncIterator[StreamEvent]:
        return self._stream(self.typesetting_task, request, is_cancelled)

    def stream_structure(
        self, request: StructureRequest, is_cancelled: CancellationCheck | None = None
    ) -> AsyncIterator[StreamEvent]:
        return self._stream(self.structure_task, request, is_cancelled)

    def stream_website(
        self, request: WebsiteRequest, is_cancelled: CancellationCheck | None = None
    ) -> AsyncIterator[StreamEvent]:
        return self._stream(self.website_task, request, is_cancelled)

    def stream_refinement(
        self, request: RefinementRequest, is_cancelled: CancellationCheck | None = None
    ) -> AsyncIterator[StreamEvent]:
        return self._stream(self.refinement_task, request, is_cancelled)

    # Collecting

    async def typeset(self, request: TypesettingRequest) -> TypesettingResult:
        return await self._collect(self.typesetting_task, request)

    async def structure(self, request: StructureRequest) -> StructureResult:
        return await self._collect(self.structure_task, request)

    async def generate_website(self, request: WebsiteRequest) -> WebsiteResult:
        return await self._collect(self.website_task, request)

    async def refine(self, request: RefinementRequest) -> RefinementResult:
        return await self._collect(self.refinement_task, request)

    # Pipeline

    def relay(
        self,
        task: ModelTask,
        request: Any,
        is_cancelled: CancellationCheck | None = None,
    ) -> ProgressRelay:
        """
        Build the progress relay for one run of a task.

        Args:
            task: Model task to run
            request: Task request
            is_cancelled: Optional async predicate checked between chunks

        Returns:
            ProgressRelay: Event stream ending in exactly one terminal event
        """
        return ProgressRelay(self._run(task, request, is_cancelled), run_label=task.name)

    async def _stream(
        self,
        task: ModelTask,
        request: Any,
        is_cancelled: CancellationCheck | None,
    ) -> AsyncGenerator[StreamEvent, None]:
        async for event in self.relay(task, request, is_cancelled):
            yield event.to_stream_event()

    async def _collect(self, task: ModelTask, request: Any) -> Any:
        terminal = await self.relay(task, request).relay_to(lambda event: None)
        if not terminal.is_complete:
            raise PagecraftException(terminal.error or "Processing failed", details={"task": task.name})
        return terminal.result

    async def _run(
        self,
        task: ModelTask,
        request: Any,
        is_cancelled: CancellationCheck | None,
    ) -> AsyncGenerator[PipelineEvent, None]:
        start = time.perf_counter()
        content = task.source_text(request)
        logger.info(
            f"{__name__}:_run - START task={task.name}",
            extra={"task": task.name, "content_length": len(content)},
        )

        if not self.model_client.is_configured:
            logger.warning(f"{__name__}:_run - Model not configured, using fallback for {task.name}")
            yield ProgressEvent(step=FALLBACK_STEP, percentage=50)
            yield TerminalEvent.complete(task.fallback(request))
            return

        processor = partial(self._process_chunk, task, request)

        try:
            async with aclosing(self.dispatcher.dispatch(content, processor, task.combine, is_cancelled)) as events:
                async for event in events:
                    yield event
        except NothingToCombineError:
            if not self.pipeline_settings.fallback_on_total_failure:
                raise
            logger.warning(f"{__name__}:_run - Every chunk failed for {task.name}, substituting fallback")
            yield TerminalEvent.complete(task.fallback(request))
        finally:
            # The relay closes this generator as soon as the terminal event arrives
            logger.info(
                f"{__name__}:_run - END task={task.name}",
                extra={"task": task.name, "duration_ms": round((time.perf_counter() - start) * 1000, 2)},
            )

    async def _process_chunk(self, task: ModelTask, request: Any, chunk: Chunk) -> Any:
        """
        Run one chunk through prompt → model → repair → finalize.

        Raises:
            ModelUnavailableError: If the model call fails
            ResponseRepairError: If the response cannot be coerced into the result schema
        """
        prompts = task.build_prompts(request, chunk)
        model_settings = self.model_client.settings

        budget = compute_output_budget(
            prompts.user,
            output_multiplier=task.output_multiplier,
            ceiling=task.max_output_tokens,
            system_prompt=prompts.system,
            context_window_tokens=model_settings.context_window_tokens,
            safety_margin_tokens=model_settings.safety_margin_tokens,
            floor=model_settings.min_output_tokens,
            chars_per_token=self.pipeline_settings.chars_per_token,
        )

        raw = await self.model_client.acomplete(
            ModelRequest(
                system_prompt=prompts.system,
                user_prompt=prompts.user,
                response_schema=task.response_schema(),
                max_output_tokens=budget,
                temperature=task.temperature,
                task=task.name,
            )
        )

        repaired = self.repairer.repair(raw, task.result_model)
        return task.finalize(repaired.value, request, chunk, repaired.partial)
