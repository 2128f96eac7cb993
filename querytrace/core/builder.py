"""
Span builder for completed database queries.

A :class:`SpanBuilder` is registered with a database client as a per-query
hook. For every completed query it rebuilds the query's timeline from the
reported phase durations and emits a ``query`` span with ``queue``,
``run_query`` and ``decode`` children, ending at the moment the hook runs.

Work the query spawns on another thread or task (parallel preloads, for
example) is not attached to the trace; only the execution context that
invoked the hook is traced.
"""
import time
from typing import Any, Callable, Optional

from querytrace.config import NAMESPACE, ConfigProvider, TraceConfig, get_config_provider
from querytrace.core.timer import QueryTimer
from querytrace.exceptions import QueryError
from querytrace.models.event import Failure, QueryEvent, query_text, render_error, row_count
from querytrace.utils.logging import get_logger, set_trace_context
from querytrace.utils.time_units import to_nanoseconds

logger = get_logger("querytrace.builder")

LogContextSink = Callable[..., None]


class SpanBuilder:
    """
    Turns query events into span trees.

    Args:
        config_provider: Source of the builder settings; the process-wide
            provider when None.
        log_context: Callable receiving ``trace_id`` and ``span_id`` keyword
            arguments once the query span is open.
        clock: Current time in nanoseconds since the epoch.
    """

    def __init__(
        self,
        config_provider: Optional[ConfigProvider] = None,
        log_context: Optional[LogContextSink] = None,
        clock: Callable[[], int] = time.time_ns,
    ):
        self._config_provider = config_provider
        self._log_context = log_context or set_trace_context
        self._clock = clock

    @property
    def config_provider(self) -> ConfigProvider:
        return self._config_provider or get_config_provider()

    def load_config(self) -> TraceConfig:
        """Read and validate the builder settings. Raises ConfigurationError."""
        return TraceConfig.from_mapping(self.config_provider.get(NAMESPACE), owner=type(self).__name__)

    def build(self, event: QueryEvent, target: Any) -> QueryEvent:
        """
        Emit spans for a completed query.

        Args:
            event: The completed query
            target: Identifier of the database that ran it

        Returns:
            ``event`` itself, so the builder can sit in a logging pipeline.
        """
        config = self.load_config()
        tracer = config.tracer

        trace_running = tracer.current_context() is not None
        disabled = self.config_provider.is_disabled(config.owning_application, tracer)
        if not trace_running or disabled:
            return event

        now = self._clock()
        query = query_text(event)
        rows = row_count(event)

        queue_time = to_nanoseconds(event.queue_time, event.time_unit)
        run_time = to_nanoseconds(event.query_time, event.time_unit)
        decode_time = to_nanoseconds(event.decode_time, event.time_unit)

        start = now - (queue_time + run_time + decode_time)

        tracer.start_span(
            "query",
            start=start,
            completion_time=now,
            service=config.service,
            resource=query,
            type="db",
            sql_query={
                "query": query,
                "rows": str(rows),
                "db": str(target),
            },
        )

        try:
            self._propagate_trace_context(tracer)
            self._report_error(tracer, event)

            if queue_time > 0:
                tracer.start_span("queue")
                tracer.update_span(service=config.service, start=start, completion_time=start + queue_time)
                tracer.finish_span()

            if run_time > 0:
                tracer.start_span("run_query")
                tracer.update_span(
                    service=config.service,
                    start=start + queue_time,
                    completion_time=start + queue_time + run_time,
                )
                tracer.finish_span()

            if decode_time > 0:
                tracer.start_span("decode")
                tracer.update_span(
                    service=config.service,
                    start=start + queue_time + run_time,
                    completion_time=now,
                )
                tracer.finish_span()
        finally:
            tracer.finish_span()

        return event

    __call__ = build

    def timed(self, query: Any, target: Any) -> QueryTimer:
        """Return a :class:`~querytrace.core.timer.QueryTimer` reporting to this builder."""
        return QueryTimer(self, query, target)

    def _propagate_trace_context(self, tracer) -> None:
        try:
            self._log_context(trace_id=tracer.current_trace_id(), span_id=tracer.current_span_id())
        except Exception as e:
            logger.warning(f"Failed to propagate trace context to logging: {e}")

    def _report_error(self, tracer, event: QueryEvent) -> None:
        result = getattr(event, "result", None)
        if isinstance(result, Failure):
            tracer.span_error(QueryError(render_error(result.error)), None)
