"""
Test suite for ChunkedTaskDispatcher.

Covers single and multi-chunk progress sequences, chunk skipping, retries
and cancellation.

System role: Verification of the model task dispatcher
"""

from collections.abc import Sequence

import pytest

from pagecraft.core.exceptions import NothingToCombineError, PipelineCancelledError
from pagecraft.core.pipeline.chunk_splitter import ChunkSplitter
from pagecraft.core.pipeline.combiner import require_results
from pagecraft.core.pipeline.dispatcher import ChunkedTaskDispatcher, chunk_percentage
from pagecraft.models.document import Chunk
from pagecraft.models.progress import ProgressEvent, TerminalEvent


def join_results(results: Sequence[str]) -> str:
    return "|".join(require_results(results))


async def echo_index(chunk: Chunk) -> str:
    return f"chunk-{chunk.index}"


async def collect(events) -> list:
    return [event async for event in events]


@pytest.fixture
def dispatcher() -> ChunkedTaskDispatcher:
    return ChunkedTaskDispatcher(ChunkSplitter(max_tokens=50))


class TestChunkPercentage:
    """Test suite for chunk_percentage."""

    def test_should_reserve_setup_and_combining_ranges(self) -> None:
        assert chunk_percentage(0, 4) == 10
        assert chunk_percentage(2, 4) == 50

    def test_should_round_half_up(self) -> None:
        assert [chunk_percentage(i, 3) for i in range(3)] == [10, 37, 63]


class TestDispatchSingleChunk:
    """Test suite for the unsplit path."""

    @pytest.mark.asyncio
    async def test_should_emit_fixed_progress_sequence(self, dispatcher) -> None:
        # Act
        events = await collect(dispatcher.dispatch("short text", echo_index, join_results))

        # Assert
        progress = [e for e in events if isinstance(e, ProgressEvent)]
        assert [(e.step, e.percentage) for e in progress] == [
            ("Processing content...", 50),
            ("Processing complete", 100),
        ]
        assert isinstance(events[-1], TerminalEvent)
        assert events[-1].result == "chunk-0"

    @pytest.mark.asyncio
    async def test_failed_single_chunk_should_raise_from_combiner(self, dispatcher) -> None:
        async def failing(chunk: Chunk) -> str:
            raise RuntimeError("boom")

        with pytest.raises(NothingToCombineError):
            await collect(dispatcher.dispatch("short text", failing, join_results))


class TestDispatchMultiChunk:
    """Test suite for the chunked path."""

    @pytest.mark.asyncio
    async def test_should_report_each_chunk_then_combine(self, dispatcher, make_paragraphs) -> None:
        # Act
        events = await collect(dispatcher.dispatch(make_paragraphs(3), echo_index, join_results))

        # Assert
        progress = [e for e in events if isinstance(e, ProgressEvent)]
        assert [e.step for e in progress] == [
            "Processing chunk 1 of 3...",
            "Processing chunk 2 of 3...",
            "Processing chunk 3 of 3...",
            "Combining results...",
            "Processing complete",
        ]
        assert [e.percentage for e in progress] == [10, 37, 63, 95, 100]
        assert [e.chunk_index for e in progress[:3]] == [1, 2, 3]
        assert events[-1].result == "chunk-0|chunk-1|chunk-2"

    @pytest.mark.asyncio
    async def test_progress_should_be_monotonic_with_one_terminal(self, dispatcher, make_paragraphs) -> None:
        events = await collect(dispatcher.dispatch(make_paragraphs(6), echo_index, join_results))

        percentages = [e.percentage for e in events]
        assert percentages == sorted(percentages)
        assert sum(isinstance(e, TerminalEvent) for e in events) == 1
        assert isinstance(events[-1], TerminalEvent)

    @pytest.mark.asyncio
    async def test_failed_chunk_should_be_skipped(self, dispatcher, make_paragraphs) -> None:
        # Arrange
        async def flaky(chunk: Chunk) -> str:
            if chunk.index == 1:
                raise ValueError("bad chunk")
            return f"chunk-{chunk.index}"

        # Act
        result = await dispatcher.run(make_paragraphs(3), flaky, join_results)

        # Assert
        assert result == "chunk-0|chunk-2"

    @pytest.mark.asyncio
    async def test_all_chunks_failing_should_raise_nothing_to_combine(self, dispatcher, make_paragraphs) -> None:
        async def failing(chunk: Chunk) -> str:
            raise RuntimeError("boom")

        with pytest.raises(NothingToCombineError):
            await dispatcher.run(make_paragraphs(3), failing, join_results)


class TestDispatchRetries:
    """Test suite for per-chunk retries."""

    @pytest.mark.asyncio
    async def test_should_retry_before_skipping(self) -> None:
        # Arrange
        dispatcher = ChunkedTaskDispatcher(ChunkSplitter(), max_retries=1, retry_backoff_seconds=0)
        attempts = []

        async def fails_once(chunk: Chunk) -> str:
            attempts.append(chunk.index)
            if len(attempts) == 1:
                raise RuntimeError("transient")
            return "ok"

        # Act
        result = await dispatcher.run("short text", fails_once, join_results)

        # Assert
        assert result == "ok"
        assert attempts == [0, 0]

    @pytest.mark.asyncio
    async def test_no_retry_by_default(self, dispatcher) -> None:
        attempts = []

        async def always_fails(chunk: Chunk) -> str:
            attempts.append(chunk.index)
            raise RuntimeError("down")

        with pytest.raises(NothingToCombineError):
            await dispatcher.run("short text", always_fails, join_results)

        assert attempts == [0]


class TestDispatchCancellation:
    """Test suite for cancellation checks."""

    @pytest.mark.asyncio
    async def test_should_stop_when_cancelled(self, dispatcher, make_paragraphs) -> None:
        # Arrange
        processed = []
        checks = iter([False, True])

        async def is_cancelled() -> bool:
            return next(checks)

        async def record(chunk: Chunk) -> str:
            processed.append(chunk.index)
            return "x"

        # Act / Assert
        with pytest.raises(PipelineCancelledError):
            await collect(dispatcher.dispatch(make_paragraphs(3), record, join_results, is_cancelled))

        assert processed == [0]
