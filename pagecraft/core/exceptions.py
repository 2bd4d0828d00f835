"""
Exception hierarchy for the pagecraft conversion backend.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class PagecraftException(Exception):
    """Base exception for all pagecraft application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ModelConfigurationError(PagecraftException):
    """Raised when model credentials are absent or invalid."""

    def __init__(
        self,
        message: str = "Model credentials are not configured",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)


class ModelUnavailableError(PagecraftException):
    """Raised when a model call times out, is rejected or returns nothing."""

    def __init__(
        self,
        message: str,
        task: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize model unavailable error.

        Args:
            message: Error message
            task: Model task that was being executed
            details: Additional context
        """
        details = details or {}
        if task:
            details["task"] = task
        super().__init__(message, details)


class ResponseRepairError(PagecraftException):
    """Raised when every repair strategy fails on a model response."""

    def __init__(
        self,
        message: str,
        response_preview: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize response repair error.

        Args:
            message: Error message
            response_preview: Leading characters of the unusable response
            details: Additional context
        """
        details = details or {}
        if response_preview is not None:
            details["response_preview"] = response_preview
        super().__init__(message, details)


class NothingToCombineError(PagecraftException):
    """Raised when a combiner receives zero chunk results."""

    def __init__(
        self,
        task: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if task:
            details["task"] = task
        super().__init__("Nothing to combine: every chunk failed", details)


class PipelineCancelledError(PagecraftException):
    """Raised when the caller abandons a pipeline run."""

    pass
