"""Core span building."""

from .builder import SpanBuilder
from .timer import QueryTimer

__all__ = ["SpanBuilder", "QueryTimer"]
