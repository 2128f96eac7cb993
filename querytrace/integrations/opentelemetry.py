"""
OpenTelemetry integration for querytrace.

:class:`OpenTelemetryTracer` adapts the OpenTelemetry API to the imperative
start/update/finish interface the span builder drives. Spans opened through
it are tracked on a per-execution-context stack and are never attached to the
global OpenTelemetry context, so they cannot leak past the call that opened
them.
"""
from contextvars import ContextVar
from typing import Any, Dict, Mapping, Optional, Tuple

from opentelemetry import context as otel_context
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode, format_span_id, format_trace_id
from opentelemetry.trace.span import Span, SpanContext

from querytrace import __version__
from querytrace.exceptions import TracingError
from querytrace.tracer.base import BaseTracer
from querytrace.utils.logging import get_logger

logger = get_logger("querytrace.opentelemetry")

_ATTRIBUTE_NAMES = {
    "service": "service.name",
    "resource": "resource.name",
    "type": "span.type",
}

_TIMING_OPTIONS = ("start", "completion_time")


def _attribute_value(value: Any) -> Any:
    if isinstance(value, (str, bool, int, float)):
        return value
    return str(value)


def span_attributes(options: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Translate span options into OpenTelemetry attributes.

    Nested mappings are flattened as ``<option>.<key>``; timing options are
    not attributes and are skipped.
    """
    attributes: Dict[str, Any] = {}
    for key, value in options.items():
        if key in _TIMING_OPTIONS or value is None:
            continue
        if isinstance(value, Mapping):
            for sub_key, sub_value in value.items():
                if sub_value is not None:
                    attributes[f"{key}.{sub_key}"] = _attribute_value(sub_value)
        else:
            attributes[_ATTRIBUTE_NAMES.get(key, key)] = _attribute_value(value)
    return attributes


class _SpanFrame:
    """An open span; created in OpenTelemetry lazily once its start time is known."""

    def __init__(self, name: str, options: Dict[str, Any], parent: Optional["_SpanFrame"], parent_context):
        self.name = name
        self.options = options
        self.parent = parent
        self.parent_context = parent_context
        self.span: Optional[Span] = None

    def ensure_started(self, tracer) -> Span:
        if self.span is None:
            if self.parent is not None:
                context = trace.set_span_in_context(self.parent.ensure_started(tracer))
            else:
                context = self.parent_context
            self.span = tracer.start_span(
                self.name,
                context=context,
                start_time=self.options.get("start"),
                attributes=span_attributes(self.options),
            )
        return self.span


_span_stack: ContextVar[Tuple[_SpanFrame, ...]] = ContextVar("querytrace_span_stack", default=())


class OpenTelemetryTracer(BaseTracer):
    """
    Tracer backed by an OpenTelemetry ``Tracer``.

    A trace counts as running when either a span opened through this tracer
    is still open, or the ambient OpenTelemetry context holds a valid span
    (for example a request span from web framework instrumentation).
    """

    name = "opentelemetry"

    def __init__(self, tracer: Optional[trace.Tracer] = None, tracer_provider=None):
        """
        Args:
            tracer: OpenTelemetry tracer to create spans with
            tracer_provider: Provider to obtain a tracer from when ``tracer`` is
                not given (the global provider if None)
        """
        self._tracer = tracer or trace.get_tracer("querytrace", __version__, tracer_provider=tracer_provider)

    def _top(self) -> Optional[_SpanFrame]:
        stack = _span_stack.get()
        return stack[-1] if stack else None

    def _require_top(self, operation: str) -> _SpanFrame:
        frame = self._top()
        if frame is None:
            raise TracingError(f"{operation} called with no open span")
        return frame

    def current_context(self) -> Optional[SpanContext]:
        frame = self._top()
        if frame is not None:
            return frame.ensure_started(self._tracer).get_span_context()

        span_context = trace.get_current_span().get_span_context()
        if span_context.is_valid:
            return span_context
        return None

    def current_trace_id(self) -> Optional[str]:
        span_context = self.current_context()
        return format_trace_id(span_context.trace_id) if span_context else None

    def current_span_id(self) -> Optional[str]:
        span_context = self.current_context()
        return format_span_id(span_context.span_id) if span_context else None

    def start_span(self, name: str, **options: Any) -> None:
        stack = _span_stack.get()
        parent = stack[-1] if stack else None
        frame = _SpanFrame(
            name,
            dict(options),
            parent,
            otel_context.get_current() if parent is None else None,
        )
        if "start" in options:
            frame.ensure_started(self._tracer)
        _span_stack.set(stack + (frame,))

    def update_span(self, **options: Any) -> None:
        frame = self._require_top("update_span")
        if frame.span is None:
            frame.options.update(options)
            return

        if "start" in options:
            logger.debug(f"Ignoring start time update for already started span {frame.name!r}")
        if "completion_time" in options:
            frame.options["completion_time"] = options["completion_time"]
        attributes = span_attributes(options)
        if attributes:
            frame.span.set_attributes(attributes)

    def finish_span(self) -> None:
        frame = self._require_top("finish_span")
        stack = _span_stack.get()
        _span_stack.set(stack[:-1])

        span = frame.ensure_started(self._tracer)
        span.end(end_time=frame.options.get("completion_time"))

    def span_error(self, error: BaseException, context: Optional[Any] = None) -> None:
        frame = self._require_top("span_error")
        span = frame.ensure_started(self._tracer)
        span.record_exception(error)
        span.set_status(Status(StatusCode.ERROR, str(error)))
