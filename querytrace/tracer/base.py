"""
Base class for tracers the span builder can drive.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class BaseTracer(ABC):
    """
    Abstract tracer with an implicit "current span" per execution context.

    ``start_span`` opens a span as a child of the current one and makes it
    current; ``finish_span`` closes the current span and restores its parent.
    Timestamps passed through ``start``/``completion_time`` options are
    nanoseconds since the epoch.
    """

    #: Key used to look up per-application settings for this tracer
    name: str = "tracer"

    @abstractmethod
    def current_context(self) -> Optional[Any]:
        """
        Get the context of the active span.

        Returns:
            A span context if a trace is running in this execution context,
            None otherwise.
        """
        pass

    @abstractmethod
    def current_trace_id(self) -> Optional[str]:
        """Id of the active trace, or None."""
        pass

    @abstractmethod
    def current_span_id(self) -> Optional[str]:
        """Id of the active span, or None."""
        pass

    @abstractmethod
    def start_span(self, name: str, **options: Any) -> None:
        """
        Open a span as a child of the current span and make it current.

        Args:
            name: Span name.
            **options: ``start``, ``completion_time``, ``service``,
                ``resource``, ``type`` and arbitrary metadata.
        """
        pass

    @abstractmethod
    def update_span(self, **options: Any) -> None:
        """Merge options into the current span."""
        pass

    @abstractmethod
    def finish_span(self) -> None:
        """Close the current span and make its parent current."""
        pass

    @abstractmethod
    def span_error(self, error: BaseException, context: Optional[Any] = None) -> None:
        """
        Mark the current span as failed.

        Args:
            error: The error to record.
            context: Stack or other context for the error, if any.
        """
        pass
