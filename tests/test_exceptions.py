import pytest
from querytrace.exceptions import (
    QueryTraceError,
    ConfigurationError,
    TracingError,
    QueryError
)

def test_querytrace_error_inheritance():
    """Test that all exceptions inherit from QueryTraceError."""
    assert issubclass(ConfigurationError, QueryTraceError)
    assert issubclass(TracingError, QueryTraceError)
    assert issubclass(QueryError, QueryTraceError)

def test_configuration_error_with_message():
    """Test ConfigurationError with a custom message."""
    msg = "tracer is a required option for SpanBuilder"
    error = ConfigurationError(msg)
    assert str(error) == msg
    assert error.original_exception is None

def test_configuration_error_with_original_exception():
    """Test ConfigurationError with an original exception."""
    original = TypeError("'tracer' must be <class 'BaseTracer'>")
    error = ConfigurationError("Invalid configuration for SpanBuilder", original)
    assert "Original:" in str(error)
    assert "must be" in str(error)

def test_query_error_message():
    """Test that QueryError renders exactly its message."""
    error = QueryError("timeout")
    assert str(error) == "timeout"
    assert error.message == "timeout"

def test_tracing_error_usage():
    """Test TracingError usage."""
    with pytest.raises(TracingError):
        raise TracingError("finish_span called with no open span")
