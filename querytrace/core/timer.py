"""
Phase timing for queries issued through plain DB-API style clients.

Drivers that do not report their own queue/execute/decode breakdown can wrap
the query in a :class:`QueryTimer`::

    with builder.timed("SELECT * FROM users", "primary") as timer:
        conn = pool.acquire()
        timer.checked_out()
        cursor = conn.execute("SELECT * FROM users")
        timer.executed()
        rows = cursor.fetchall()
        timer.rows = len(rows)
"""
import time
from typing import Any, Callable, Optional

from querytrace.models.event import Failure, QueryEvent, Success
from querytrace.utils.time_units import TimeUnit


class QueryTimer:
    """
    Measures the queue, execute and decode phases of one query.

    Everything before :meth:`checked_out` is queueing, everything between the
    two marks is execution and everything after :meth:`executed` is decoding.
    A mark that is never made collapses its phase to zero. On exit the
    resulting :class:`QueryEvent` is handed to the builder; exceptions raised
    inside the block are recorded as a failed query and re-raised.
    """

    def __init__(self, builder, query: Any, target: Any, clock: Callable[[], int] = time.perf_counter_ns):
        self.builder = builder
        self.query = query
        self.target = target
        self.rows: Optional[int] = None
        self.event: Optional[QueryEvent] = None
        self._clock = clock
        self._entered: Optional[int] = None
        self._checked_out: Optional[int] = None
        self._executed: Optional[int] = None

    def checked_out(self) -> None:
        """Mark the end of queueing (connection acquired)."""
        self._checked_out = self._clock()

    def executed(self) -> None:
        """Mark the end of execution (results available for decoding)."""
        self._executed = self._clock()

    def __enter__(self) -> "QueryTimer":
        self._entered = self._clock()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        finished = self._clock()

        execute_from = self._checked_out if self._checked_out is not None else self._entered
        execute_until = self._executed if self._executed is not None else finished

        if exc_val is not None:
            result = Failure(exc_val)
        else:
            result = Success(self.rows)

        self.event = QueryEvent(
            query=self.query,
            result=result,
            queue_time=execute_from - self._entered,
            query_time=execute_until - execute_from,
            decode_time=finished - execute_until,
            time_unit=TimeUnit.NATIVE,
        )
        self.builder.build(self.event, self.target)
        return False
