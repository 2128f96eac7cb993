"""
Models package for querytrace.
"""

from .event import (
    Failure,
    Outcome,
    QueryEvent,
    Success,
    query_text,
    render_error,
    row_count,
    unescape
)

__all__ = [
    "Failure",
    "Outcome",
    "QueryEvent",
    "Success",
    "query_text",
    "render_error",
    "row_count",
    "unescape"
]
