"""
Progress relay.

Forwards pipeline events to the caller in order and guards the stream
contract: percentages never decrease, exactly one terminal event is emitted,
and nothing follows it. The relay is transport-agnostic; the API layer frames
its events as SSE, and relay_to() pushes them to an in-process callback.

Dependencies: contextlib, pagecraft.models.progress
System role: Progress Relay of the model task pipeline
"""

import logging
from collections.abc import AsyncGenerator, AsyncIterator, Awaitable, Callable
from contextlib import aclosing

from pagecraft.core.exceptions import PagecraftException, PipelineCancelledError
from pagecraft.models.progress import PipelineEvent, TerminalEvent
from pagecraft.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)

MISSING_TERMINAL_MESSAGE = "Processing ended without a result"


class ProgressRelay:
    """
    Ordered, single-terminal event stream over a pipeline run.

    Usage:
        relay = ProgressRelay(dispatcher.dispatch(content, processor, combiner))
        async for event in relay:
            ...
    """

    def __init__(self, source: AsyncIterator[PipelineEvent], run_label: str = "pipeline") -> None:
        self._source = source
        self._run_label = run_label
        self._consumed = False

    def __aiter__(self) -> AsyncIterator[PipelineEvent]:
        return self._relay()

    async def _relay(self) -> AsyncGenerator[PipelineEvent, None]:
        if self._consumed:
            raise RuntimeError("ProgressRelay can only be iterated once")
        self._consumed = True

        last_percentage = 0
        terminal: TerminalEvent | None = None

        try:
            async with aclosing(self._source) as source:
                async for event in source:
                    if isinstance(event, TerminalEvent):
                        terminal = event
                        break
                    if event.percentage < last_percentage:
                        logger.warning(
                            f"{__name__}:_relay - Clamped regressing progress",
                            extra={
                                "run": self._run_label,
                                "reported": event.percentage,
                                "previous": last_percentage,
                            },
                        )
                        event = event.model_copy(update={"percentage": last_percentage})
                    last_percentage = event.percentage
                    yield event
        except PipelineCancelledError as e:
            logger.info(f"{__name__}:_relay - Run cancelled: {self._run_label}")
            terminal = TerminalEvent.failure(e.message, step="Processing cancelled")
        except PagecraftException as e:
            logger.error(f"{__name__}:_relay - {self._run_label} failed: {e}")
            terminal = TerminalEvent.failure(e.message)
        except Exception as e:
            log_with_context(
                logger,
                logging.ERROR,
                f"{__name__}:_relay - Unexpected error in {self._run_label}",
                exc=e,
                run=self._run_label,
            )
            terminal = TerminalEvent.failure(str(e) or type(e).__name__)

        if terminal is None:
            logger.error(f"{__name__}:_relay - {self._run_label} ended without a terminal event")
            terminal = TerminalEvent.failure(MISSING_TERMINAL_MESSAGE)

        yield terminal

    async def relay_to(self, callback: Callable[[PipelineEvent], Awaitable[None] | None]) -> TerminalEvent:
        """
        Push every event to a callback and return the terminal event.

        Args:
            callback: Sync or async callable invoked once per event

        Returns:
            TerminalEvent: The run's terminal event
        """
        terminal: TerminalEvent | None = None
        async for event in self:
            outcome = callback(event)
            if outcome is not None:
                await outcome
            if isinstance(event, TerminalEvent):
                terminal = event
        if terminal is None:
            raise RuntimeError(f"{self._run_label} finished without a terminal event")
        return terminal
