"""
Model task pipeline.

Splits large documents into token-bounded chunks, runs a model task over each
chunk sequentially, repairs malformed model JSON, merges the per-chunk results
and relays progress to the caller with exactly one terminal event.

Usage:
    from pagecraft.core.pipeline import ChunkSplitter, ChunkedTaskDispatcher, ProgressRelay

    dispatcher = ChunkedTaskDispatcher(ChunkSplitter(max_tokens=7000))
    async for event in ProgressRelay(dispatcher.dispatch(text, processor, combiner)):
        ...
"""

from pagecraft.core.pipeline.chunk_splitter import ChunkSplitter
from pagecraft.core.pipeline.dispatcher import ChunkedTaskDispatcher
from pagecraft.core.pipeline.json_repair import RepairResult, ResponseRepairer
from pagecraft.core.pipeline.progress_relay import ProgressRelay
from pagecraft.core.pipeline.token_estimator import compute_output_budget, estimate_tokens

__all__ = [
    "ChunkSplitter",
    "ChunkedTaskDispatcher",
    "RepairResult",
    "ResponseRepairer",
    "ProgressRelay",
    "compute_output_budget",
    "estimate_tokens",
]
