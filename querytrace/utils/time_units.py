"""
Duration unit conversion.

Query events report their phase durations in whatever unit the producing
client measures in. Everything downstream works in nanoseconds, so every
duration goes through :func:`to_nanoseconds` exactly once.
"""
import math
from enum import Enum
from typing import Any


class TimeUnit(Enum):
    """Units a query event may express its durations in."""

    SECOND = "second"
    MILLISECOND = "millisecond"
    MICROSECOND = "microsecond"
    NANOSECOND = "nanosecond"
    # time.perf_counter_ns() / time.time_ns()
    NATIVE = "native"

    @property
    def nanoseconds(self) -> int:
        """Number of nanoseconds in one unit."""
        return _NANOS_PER_UNIT[self]


_NANOS_PER_UNIT = {
    TimeUnit.SECOND: 1_000_000_000,
    TimeUnit.MILLISECOND: 1_000_000,
    TimeUnit.MICROSECOND: 1_000,
    TimeUnit.NANOSECOND: 1,
    TimeUnit.NATIVE: 1,
}


def to_nanoseconds(value: Any, unit: TimeUnit = TimeUnit.NATIVE) -> int:
    """
    Convert a duration to nanoseconds.

    Args:
        value: Duration expressed in ``unit``
        unit: Unit of ``value``

    Returns:
        The duration in nanoseconds. Anything that is not a finite,
        non-negative number (None, strings, booleans, NaN, ...) converts to 0.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value * unit.nanoseconds if value > 0 else 0
    if isinstance(value, float):
        if not math.isfinite(value) or value <= 0:
            return 0
        return int(round(value * unit.nanoseconds))
    return 0
