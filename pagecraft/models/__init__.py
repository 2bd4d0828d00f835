"""
Pydantic schemas shared across layers.

- document: Request payloads and chunks
- results: Model task result shapes
- progress: Pipeline progress and terminal events
- streaming: SSE event framing
"""
