"""
Structured logging system for querytrace.

This module provides structured logging with the ambient trace context
(trace_id, span_id) carried in context variables, so every log statement made
after a query span was emitted can be correlated with that trace.
"""
import json
import logging
import logging.handlers
import sys
import threading
from contextvars import ContextVar
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

# Context variables for the ambient trace context
trace_id_var: ContextVar[Optional[str]] = ContextVar('querytrace_trace_id', default=None)
span_id_var: ContextVar[Optional[str]] = ContextVar('querytrace_span_id', default=None)

_RESERVED_RECORD_KEYS = frozenset([
    'name', 'msg', 'args', 'levelname', 'levelno',
    'pathname', 'filename', 'module', 'lineno',
    'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process',
    'getMessage', 'exc_info', 'exc_text', 'stack_info',
    'taskName', 'trace_id', 'span_id', 'message',
])


class StructuredFormatter(logging.Formatter):
    """
    Structured JSON formatter.

    Outputs one JSON object per record with timestamp, level, logger, the
    trace context when present, and any extra fields.
    """

    def __init__(self, include_trace_context: bool = True):
        super().__init__()
        self.include_trace_context = include_trace_context

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as structured JSON.

        Args:
            record: Log record to format

        Returns:
            JSON formatted log string
        """
        timestamp = datetime.fromtimestamp(record.created).isoformat() + "Z"

        log_entry = {
            "timestamp": timestamp,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if self.include_trace_context:
            trace_id = getattr(record, 'trace_id', None) or trace_id_var.get()
            span_id = getattr(record, 'span_id', None) or span_id_var.get()
            if trace_id:
                log_entry["trace_id"] = trace_id
            if span_id:
                log_entry["span_id"] = span_id

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info)
            }

        for key, value in record.__dict__.items():
            if key.startswith('_') or key in _RESERVED_RECORD_KEYS:
                continue
            if isinstance(value, (str, int, float, bool, list, dict, type(None))):
                log_entry[key] = value

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class TraceContextFilter(logging.Filter):
    """
    Log filter that stamps the current trace context onto log records.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Add trace_id and span_id to the log record.

        Args:
            record: Log record to process

        Returns:
            Always True; the filter never drops records
        """
        record.trace_id = trace_id_var.get()
        record.span_id = span_id_var.get()
        return True


class ThreadSafeLogManager:
    """
    Thread-safe centralized log manager for querytrace.

    Owns the root handlers and hands out named loggers.
    """

    def __init__(self,
                 log_level: str = "INFO",
                 log_format: str = "json",
                 log_file: Optional[str] = None,
                 max_bytes: int = 10 * 1024 * 1024,  # 10MB
                 backup_count: int = 5,
                 include_trace_context: bool = True):
        """
        Initialize the log manager.

        Args:
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_format: Log format ('json' or 'text')
            log_file: Path to log file (optional)
            max_bytes: Maximum size of log file before rotation
            backup_count: Number of backup files to keep
            include_trace_context: Whether to stamp trace_id/span_id on records
        """
        self.log_level = getattr(logging, log_level.upper())
        self.log_format = log_format
        self.log_file = log_file
        self.max_bytes = max_bytes
        self.backup_count = backup_count
        self.include_trace_context = include_trace_context

        self._lock = threading.RLock()
        self._initialized = False
        self._loggers: Dict[str, logging.Logger] = {}
        self._handlers: List[logging.Handler] = []

        self._safe_initialize()

    def _safe_initialize(self):
        """Thread-safe initialization."""
        with self._lock:
            if not self._initialized:
                try:
                    self._configure_root_logger()
                except (OSError, ValueError) as e:
                    # Fallback to basic logging if configuration fails
                    logging.basicConfig(level=self.log_level)
                    logging.error(f"Failed to initialize querytrace logging: {e}")
                self._initialized = True

    def _build_formatter(self) -> logging.Formatter:
        if self.log_format == "json":
            return StructuredFormatter(self.include_trace_context)
        if self.include_trace_context:
            return logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - [trace_id=%(trace_id)s span_id=%(span_id)s] %(message)s'
            )
        return logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    def _configure_root_logger(self):
        """Configure the root logger with handlers."""
        root_logger = logging.getLogger()
        root_logger.setLevel(self.log_level)

        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        formatter = self._build_formatter()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(self.log_level)
        console_handler.setFormatter(formatter)
        if self.include_trace_context:
            console_handler.addFilter(TraceContextFilter())
        root_logger.addHandler(console_handler)
        self._handlers.append(console_handler)

        if self.log_file:
            log_path = Path(self.log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                self.log_file,
                maxBytes=self.max_bytes,
                backupCount=self.backup_count
            )
            file_handler.setLevel(self.log_level)
            file_handler.setFormatter(formatter)
            if self.include_trace_context:
                file_handler.addFilter(TraceContextFilter())
            root_logger.addHandler(file_handler)
            self._handlers.append(file_handler)

    def get_logger(self, name: str) -> logging.Logger:
        """
        Get a logger with the specified name.

        Args:
            name: Logger name

        Returns:
            Configured logger instance
        """
        with self._lock:
            if name not in self._loggers:
                self._loggers[name] = logging.getLogger(name)
            return self._loggers[name]

    def shutdown(self):
        """Close the handlers this manager installed."""
        with self._lock:
            root_logger = logging.getLogger()
            for handler in self._handlers:
                root_logger.removeHandler(handler)
                handler.close()
            self._handlers = []


# Global log manager instance with thread safety
_log_manager: Optional[ThreadSafeLogManager] = None
_log_manager_lock = threading.RLock()


def initialize_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    log_file: Optional[str] = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    include_trace_context: bool = True,
    force: bool = False
) -> ThreadSafeLogManager:
    """
    Initialize the global logging system.

    Handlers are installed once per process; later calls return the existing
    manager unless ``force`` is set.

    Args:
        log_level: Logging level
        log_format: Log format ('json' or 'text')
        log_file: Path to log file
        max_bytes: Maximum size of log file before rotation
        backup_count: Number of backup files to keep
        include_trace_context: Whether to stamp trace_id/span_id on records
        force: Replace an existing manager

    Returns:
        Configured log manager instance
    """
    global _log_manager

    with _log_manager_lock:
        if _log_manager is not None and force:
            _log_manager.shutdown()
            _log_manager = None
        if _log_manager is None:
            _log_manager = ThreadSafeLogManager(
                log_level=log_level,
                log_format=log_format,
                log_file=log_file,
                max_bytes=max_bytes,
                backup_count=backup_count,
                include_trace_context=include_trace_context
            )

    return _log_manager


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the specified name.

    Library modules call this at import time, so it does not install any
    handlers; that is left to :func:`initialize_logging`.
    """
    with _log_manager_lock:
        if _log_manager is None:
            return logging.getLogger(name)
        return _log_manager.get_logger(name)


def set_trace_context(trace_id: Optional[str] = None, span_id: Optional[str] = None) -> None:
    """
    Set the trace context seen by subsequent log statements in this context.

    Args:
        trace_id: Hex trace id of the active trace
        span_id: Hex span id of the active span
    """
    trace_id_var.set(trace_id)
    span_id_var.set(span_id)


def get_trace_context() -> Dict[str, Optional[str]]:
    """Return the current trace context as ``{"trace_id": ..., "span_id": ...}``."""
    return {"trace_id": trace_id_var.get(), "span_id": span_id_var.get()}


def clear_trace_context() -> None:
    """Clear the current trace context."""
    trace_id_var.set(None)
    span_id_var.set(None)


class TraceContext:
    """
    Context manager that scopes a trace context to a block.
    """

    def __init__(self, trace_id: Optional[str] = None, span_id: Optional[str] = None):
        self.trace_id = trace_id
        self.span_id = span_id
        self._tokens: Any = None

    def __enter__(self):
        self._tokens = (trace_id_var.set(self.trace_id), span_id_var.set(self.span_id))
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        trace_token, span_token = self._tokens
        span_id_var.reset(span_token)
        trace_id_var.reset(trace_token)


def with_trace_context(trace_id: Optional[str] = None, span_id: Optional[str] = None) -> TraceContext:
    """
    Create a trace context scope.

    Args:
        trace_id: Hex trace id
        span_id: Hex span id

    Returns:
        TraceContext instance
    """
    return TraceContext(trace_id, span_id)
