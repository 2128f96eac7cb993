"""Tests for the query phase timer."""
import pytest

from querytrace.config import ConfigProvider
from querytrace.core.builder import SpanBuilder
from querytrace.core.timer import QueryTimer
from querytrace.models.event import Failure, Success
from tests.mocks.mock_tracer import MockTracer


class FakeClock:
    def __init__(self, *ticks):
        self.ticks = list(ticks)

    def __call__(self):
        return self.ticks.pop(0)


class RecordingBuilder:
    def __init__(self):
        self.built = []

    def build(self, event, target):
        self.built.append((event, target))
        return event


def test_all_phases_marked():
    builder = RecordingBuilder()
    timer = QueryTimer(builder, "SELECT 1", "primary", clock=FakeClock(100, 130, 180, 200))

    with timer:
        timer.checked_out()
        timer.executed()
        timer.rows = 4

    event, target = builder.built[0]
    assert target == "primary"
    assert event.query == "SELECT 1"
    assert event.result == Success(4)
    assert (event.queue_time, event.query_time, event.decode_time) == (30, 50, 20)
    assert timer.event is event


def test_missing_marks_collapse_phases():
    builder = RecordingBuilder()
    timer = QueryTimer(builder, "SELECT 1", "primary", clock=FakeClock(100, 250))

    with timer:
        pass

    event, _ = builder.built[0]
    assert (event.queue_time, event.query_time, event.decode_time) == (0, 150, 0)
    assert event.result == Success(None)


def test_failure_is_recorded_and_reraised():
    builder = RecordingBuilder()
    timer = QueryTimer(builder, "SELECT 1", "primary", clock=FakeClock(0, 10, 25))
    error = RuntimeError("connection reset")

    with pytest.raises(RuntimeError):
        with timer:
            timer.checked_out()
            raise error

    event, _ = builder.built[0]
    assert event.result == Failure(error)
    assert (event.queue_time, event.query_time, event.decode_time) == (10, 15, 0)


def test_timed_reports_to_span_builder():
    tracer = MockTracer()
    provider = ConfigProvider({
        "querytrace": {"owning_application": "shop", "tracer": tracer},
    })
    builder = SpanBuilder(provider, log_context=lambda **_: None, clock=lambda: 1_000_000)

    with builder.timed("SELECT 1", "primary") as timer:
        timer.rows = 1

    assert isinstance(timer, QueryTimer)
    assert tracer.started()[0] == "query"
