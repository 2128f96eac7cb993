#!/usr/bin/env python3
"""
Query tracing demo for querytrace

Runs a few sqlite3 queries inside a request span and prints the resulting
query spans to the console.
"""

import sqlite3

from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor

from querytrace import ConfigProvider, OpenTelemetryTracer, SpanBuilder
from querytrace.utils.logging import get_logger, initialize_logging


def setup_tracing():
    """Create an SDK tracer provider that prints finished spans."""
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))
    return provider


def run_query(builder, conn, sql):
    with builder.timed(sql, "demo.db") as timer:
        cursor = conn.cursor()
        timer.checked_out()
        cursor.execute(sql)
        timer.executed()
        rows = cursor.fetchall()
        timer.rows = len(rows)
    return rows


def main():
    initialize_logging(log_level="INFO", log_format="text")
    logger = get_logger("querytrace.demo")

    provider = setup_tracing()
    otel_tracer = provider.get_tracer("querytrace-demo")
    tracer = OpenTelemetryTracer(tracer=otel_tracer)

    builder = SpanBuilder(ConfigProvider({
        "querytrace": {"owning_application": "demo", "tracer": tracer, "service": "sqlite"},
        "demo": {"opentelemetry": {"disabled": False}},
    }))

    conn = sqlite3.connect(":memory:")
    conn.execute("CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT)")
    conn.executemany("INSERT INTO users (name) VALUES (?)", [("ada",), ("grace",), ("linus",)])

    with otel_tracer.start_as_current_span("request"):
        rows = run_query(builder, conn, "SELECT * FROM users")
        logger.info(f"Fetched {len(rows)} users")
        try:
            run_query(builder, conn, "SELECT * FROM missing_table")
        except sqlite3.OperationalError as e:
            logger.warning(f"Query failed: {e}")

    provider.shutdown()


if __name__ == "__main__":
    main()
