"""querytrace utility modules."""

from .logging import (
    get_logger,
    initialize_logging,
    set_trace_context,
    get_trace_context,
    clear_trace_context,
    with_trace_context
)
from .logging_config import (
    configure_from_environment,
    get_logging_config
)
from .time_units import TimeUnit, to_nanoseconds

__all__ = [
    # Logging functions
    "get_logger",
    "initialize_logging",
    "set_trace_context",
    "get_trace_context",
    "clear_trace_context",
    "with_trace_context",
    # Logging configuration
    "configure_from_environment",
    "get_logging_config",
    # Durations
    "TimeUnit",
    "to_nanoseconds"
]
