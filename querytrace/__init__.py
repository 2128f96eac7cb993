"""
querytrace - Query Span Builder
===============================

Turns completed database query events into trace span trees.
"""

__version__ = "0.1.0"

from .config import (
    ConfigProvider,
    TraceConfig,
    configure_from_environment,
    get_config_provider,
    set_config_provider
)
from .core.builder import SpanBuilder
from .core.timer import QueryTimer
from .exceptions import ConfigurationError, QueryError, QueryTraceError, TracingError
from .integrations.opentelemetry import OpenTelemetryTracer
from .models.event import Failure, QueryEvent, Success
from .tracer.base import BaseTracer
from .utils.time_units import TimeUnit, to_nanoseconds

__all__ = [
    "SpanBuilder",
    "QueryTimer",
    "QueryEvent",
    "Success",
    "Failure",
    "TimeUnit",
    "to_nanoseconds",
    "ConfigProvider",
    "TraceConfig",
    "configure_from_environment",
    "get_config_provider",
    "set_config_provider",
    "BaseTracer",
    "OpenTelemetryTracer",
    "QueryTraceError",
    "ConfigurationError",
    "TracingError",
    "QueryError"
]
