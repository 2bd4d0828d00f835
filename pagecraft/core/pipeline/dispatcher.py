"""
Chunked model task dispatcher.

Runs a task-specific processor over each chunk of a document, sequentially,
and combines the per-chunk results. Chunk i's result always precedes chunk
i+1's, and serialized calls stay inside the remote API's rate limits.

A chunk whose processor raises is logged and skipped so that a run returns
N-1 chunks of real content rather than none. Progress events are yielded as
the run advances; the run ends with one complete terminal event.

Dependencies: asyncio, pagecraft.core.pipeline.chunk_splitter, pagecraft.models.progress
System role: Model Task Dispatcher of the model task pipeline
"""

import asyncio
import logging
from collections.abc import AsyncGenerator, Awaitable, Callable, Sequence
from typing import Generic, TypeVar

from pagecraft.core.exceptions import PipelineCancelledError
from pagecraft.core.pipeline.chunk_splitter import ChunkSplitter
from pagecraft.models.document import Chunk
from pagecraft.models.progress import PipelineEvent, ProgressEvent, TerminalEvent

logger = logging.getLogger(__name__)

R = TypeVar("R")

Processor = Callable[[Chunk], Awaitable[R]]
Combiner = Callable[[Sequence[R]], R]
CancellationCheck = Callable[[], Awaitable[bool]]

SETUP_PERCENT = 10
CHUNK_SPAN_PERCENT = 80
COMBINING_PERCENT = 95


def chunk_percentage(index: int, total: int) -> int:
    """
    Percentage reported before processing a chunk.

    Reserves 0-10% for setup and 90-100% for combination. Rounds half up.

    Args:
        index: Zero-based chunk index
        total: Number of chunks

    Returns:
        int: Percentage in the 10-90 range
    """
    return int(index / total * CHUNK_SPAN_PERCENT + 0.5) + SETUP_PERCENT


class ChunkedTaskDispatcher(Generic[R]):
    """
    Sequential per-chunk orchestration with progress reporting.

    Attributes:
        splitter: Chunk splitter deciding whether and how to split
        max_retries: Extra attempts per chunk before skipping it
        retry_backoff_seconds: Linear backoff unit between attempts
    """

    def __init__(
        self,
        splitter: ChunkSplitter,
        max_retries: int = 0,
        retry_backoff_seconds: float = 1.0,
    ) -> None:
        self.splitter = splitter
        self.max_retries = max_retries
        self.retry_backoff_seconds = retry_backoff_seconds

    async def dispatch(
        self,
        content: str,
        processor: Processor,
        combiner: Combiner,
        is_cancelled: CancellationCheck | None = None,
    ) -> AsyncGenerator[PipelineEvent, None]:
        """
        Process content chunk by chunk, yielding progress.

        Args:
            content: Document text to process
            processor: Async callable turning one chunk into a result
            combiner: Callable merging the surviving results in chunk order
            is_cancelled: Optional async predicate checked at each chunk boundary

        Yields:
            PipelineEvent: Progress events, then one complete terminal event

        Raises:
            NothingToCombineError: From the combiner when every chunk failed
            PipelineCancelledError: If is_cancelled reports true
        """
        chunks = self.splitter.split_chunks(content)
        total = len(chunks)
        results: list[R] = []

        if total == 1:
            yield ProgressEvent(step="Processing content...", percentage=50, chunk_index=1, total_chunks=1)
            await self._check_cancelled(is_cancelled)
            result = await self._process(processor, chunks[0], total)
            if result is not None:
                results.append(result)
            combined = combiner(results)
            yield ProgressEvent(step="Processing complete", percentage=100, chunk_index=1, total_chunks=1)
            yield TerminalEvent.complete(combined)
            return

        logger.info(f"{__name__}:dispatch - Processing {total} chunks sequentially")

        for chunk in chunks:
            yield ProgressEvent(
                step=f"Processing chunk {chunk.index + 1} of {total}...",
                percentage=chunk_percentage(chunk.index, total),
                chunk_index=chunk.index + 1,
                total_chunks=total,
            )
            await self._check_cancelled(is_cancelled)
            result = await self._process(processor, chunk, total)
            if result is not None:
                results.append(result)

        logger.info(
            f"{__name__}:dispatch - {len(results)}/{total} chunks succeeded",
            extra={"succeeded": len(results), "total_chunks": total},
        )

        yield ProgressEvent(
            step="Combining results...",
            percentage=COMBINING_PERCENT,
            chunk_index=total,
            total_chunks=total,
        )
        combined = combiner(results)
        yield ProgressEvent(step="Processing complete", percentage=100, chunk_index=total, total_chunks=total)
        yield TerminalEvent.complete(combined)

    async def run(
        self,
        content: str,
        processor: Processor,
        combiner: Combiner,
        is_cancelled: CancellationCheck | None = None,
    ) -> R:
        """Consume dispatch() and return the combined result."""
        async for event in self.dispatch(content, processor, combiner, is_cancelled):
            if isinstance(event, TerminalEvent):
                return event.result
        raise RuntimeError("dispatch ended without a terminal event")

    async def _process(self, processor: Processor, chunk: Chunk, total: int) -> R | None:
        attempts = self.max_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                result = await processor(chunk)
                logger.info(f"{__name__}:_process - Processed chunk {chunk.index + 1}/{total}")
                return result
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(
                    f"{__name__}:_process - Error processing chunk {chunk.index + 1}: {type(e).__name__}: {e}",
                    extra={
                        "chunk_index": chunk.index,
                        "attempt": attempt,
                        "max_attempts": attempts,
                        "error_type": type(e).__name__,
                    },
                )
                if attempt < attempts:
                    await asyncio.sleep(self.retry_backoff_seconds * attempt)

        logger.warning(f"{__name__}:_process - Skipping chunk {chunk.index + 1}/{total}")
        return None

    @staticmethod
    async def _check_cancelled(is_cancelled: CancellationCheck | None) -> None:
        if is_cancelled is not None and await is_cancelled():
            raise PipelineCancelledError("Pipeline run cancelled by caller")
