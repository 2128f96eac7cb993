"""
Query Event Model
=================

The record a database client produces once a query has finished, and the
helpers that read a query label, a row count and an error rendering out of it.
"""

import re
from typing import Any, Callable, Optional, Union

import attrs

from querytrace.utils.logging import get_logger
from querytrace.utils.time_units import TimeUnit

logger = get_logger("querytrace.models.event")

QuerySource = Union[str, Callable[[], Optional[str]]]


@attrs.frozen
class Success:
    """Outcome of a query that completed. ``rows`` is None when the driver reports no count."""

    rows: Optional[int] = attrs.field(default=None)


@attrs.frozen
class Failure:
    """Outcome of a query that failed with an opaque driver error."""

    error: Any = attrs.field(default=None)


Outcome = Union[Success, Failure]


@attrs.frozen
class QueryEvent:
    """A completed query as reported by a database client."""

    # Literal text or a zero-argument callable producing it
    query: Any = attrs.field()
    result: Any = attrs.field()

    queue_time: Any = attrs.field(default=None)
    query_time: Any = attrs.field(default=None)
    decode_time: Any = attrs.field(default=None)

    time_unit: TimeUnit = attrs.field(
        default=TimeUnit.NATIVE,
        validator=attrs.validators.instance_of(TimeUnit)
    )


_SIMPLE_ESCAPES = {
    "0": "\0",
    "a": "\a",
    "b": "\b",
    "d": "\x7f",
    "e": "\x1b",
    "f": "\f",
    # Line continuation
    "\n": "",
    "n": "\n",
    "r": "\r",
    "s": " ",
    "t": "\t",
    "v": "\v",
}

_ESCAPE_PATTERN = re.compile(
    r"\\(?:"
    r"x\{(?P<xbraced>[0-9a-fA-F]{1,6})\}"
    r"|x(?P<hex>[0-9a-fA-F]{1,2})"
    r"|u\{(?P<ubraced>[0-9a-fA-F]{1,6})\}"
    r"|u(?P<unicode>[0-9a-fA-F]{4})"
    r"|(?P<char>.)"
    r")",
    re.DOTALL,
)


def _replace_escape(match: "re.Match") -> str:
    for group in ("xbraced", "hex", "ubraced", "unicode"):
        digits = match.group(group)
        if digits is not None:
            codepoint = int(digits, 16)
            if codepoint > 0x10FFFF:
                return match.group(0)
            return chr(codepoint)
    char = match.group("char")
    return _SIMPLE_ESCAPES.get(char, char)


def unescape(text: str) -> str:
    """
    Resolve backslash escape sequences stored literally in query text.

    Known escapes (``\\n``, ``\\t``, ``\\x41``, ``\\u00e9`` ...) become the
    character they denote; an unknown escape drops the backslash and keeps the
    character. A trailing lone backslash is left untouched.
    """
    return _ESCAPE_PATTERN.sub(_replace_escape, text)


def query_text(event: QueryEvent) -> str:
    """
    Extract a printable query label from an event. Never raises.

    Args:
        event: The completed query event

    Returns:
        The unescaped query text, or an empty string when the query field is
        neither text nor a callable producing text.
    """
    query = getattr(event, "query", None)

    if isinstance(query, str):
        return unescape(query)

    if callable(query):
        try:
            text = query()
        except Exception as e:
            logger.debug(f"Query text callable failed, using empty label: {e}")
            return ""
        if text is None:
            return ""
        if not isinstance(text, str):
            logger.debug(f"Query text callable returned {type(text).__name__}, using empty label")
            return ""
        return unescape(text)

    return ""


def row_count(event: QueryEvent) -> int:
    """Number of rows a successful query returned; 0 in every other case."""
    result = getattr(event, "result", None)
    if isinstance(result, Success) and isinstance(result.rows, int) and not isinstance(result.rows, bool):
        return result.rows
    return 0


def render_error(error: Any) -> str:
    """Human-readable rendering of an opaque driver error."""
    if isinstance(error, str):
        return error
    try:
        return repr(error)
    except Exception:
        return f"<{type(error).__name__}>"
