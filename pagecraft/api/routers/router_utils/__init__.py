"""
Router utility functions.

Contains helper functions extracted from router endpoints to keep them clean.
"""

from pagecraft.api.routers.router_utils.sse import disconnect_check, sse_response

__all__ = [
    "disconnect_check",
    "sse_response",
]
