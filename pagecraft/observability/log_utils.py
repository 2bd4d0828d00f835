"""
Structured logging helpers for pipeline context.

Raw model responses and document bodies are long and multi-line, and result
models can carry whole HTML documents. Values attached to a log record are
flattened to one short line so a failed repair or chunk does not flood the
log stream.

Dependencies: logging (stdlib), pydantic
System role: Log record context formatting
"""

import logging
from typing import Any

from pydantic import BaseModel

DEFAULT_PREVIEW_LENGTH = 500


def safe_log_value(value: Any, max_length: int = DEFAULT_PREVIEW_LENGTH) -> str:
    """
    Render a value as a single bounded line for log context.

    Strings have their whitespace collapsed, containers and pydantic models
    are summarized by size instead of dumped.

    Args:
        value: Value to render
        max_length: Length after which the rendering is cut

    Returns:
        str: Log-safe rendering
    """
    if value is None:
        return "None"
    try:
        if isinstance(value, str):
            text = " ".join(value.split())
        elif isinstance(value, BaseModel):
            text = f"{type(value).__name__}({len(type(value).model_fields)} fields)"
        elif isinstance(value, (list, tuple, set)):
            text = f"{type(value).__name__}({len(value)} items)"
        elif isinstance(value, dict):
            text = f"dict({len(value)} keys)"
        elif isinstance(value, bytes):
            text = f"bytes({len(value)})"
        else:
            text = str(value)
    except Exception as e:
        return f"<unloggable {type(value).__name__}: {type(e).__name__}>"

    if len(text) > max_length:
        return f"{text[:max_length]}... (+{len(text) - max_length} chars)"
    return text


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    exc: BaseException | None = None,
    **context: Any,
) -> None:
    """
    Log a message with flattened context fields.

    When `exc` is given, its type and message join the context and the
    traceback is attached to the record.

    Args:
        logger: Logger to write to
        level: Logging level
        message: Log message
        exc: Exception being reported, if any
        **context: Extra record attributes
    """
    extra = {key: safe_log_value(val) for key, val in context.items()}
    if exc is not None:
        extra["error_type"] = type(exc).__name__
        extra["error_msg"] = safe_log_value(str(exc))
    logger.log(level, message, exc_info=exc, extra=extra)
