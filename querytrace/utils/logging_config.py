"""
Logging configuration utilities for querytrace.
"""
import os
from typing import Any, Dict

from .logging import initialize_logging, ThreadSafeLogManager


def configure_from_environment(force: bool = False) -> ThreadSafeLogManager:
    """
    Configure logging based on environment variables.

    Environment variables:
    - QUERYTRACE_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - QUERYTRACE_LOG_FORMAT: Log format (json, text)
    - QUERYTRACE_LOG_FILE: Log file path
    - QUERYTRACE_LOG_MAX_BYTES: Max file size in bytes
    - QUERYTRACE_LOG_BACKUP_COUNT: Number of backup files
    - QUERYTRACE_LOG_INCLUDE_TRACE_CONTEXT: Stamp trace_id/span_id on records (true/false)

    Args:
        force: Replace an already initialized log manager

    Returns:
        Configured log manager
    """
    log_level = os.getenv("QUERYTRACE_LOG_LEVEL", "INFO")
    log_format = os.getenv("QUERYTRACE_LOG_FORMAT", "json")
    log_file = os.getenv("QUERYTRACE_LOG_FILE")
    max_bytes = int(os.getenv("QUERYTRACE_LOG_MAX_BYTES", "10485760"))  # 10MB default
    backup_count = int(os.getenv("QUERYTRACE_LOG_BACKUP_COUNT", "5"))
    include_trace_context = os.getenv("QUERYTRACE_LOG_INCLUDE_TRACE_CONTEXT", "true").lower() == "true"

    return initialize_logging(
        log_level=log_level,
        log_format=log_format,
        log_file=log_file,
        max_bytes=max_bytes,
        backup_count=backup_count,
        include_trace_context=include_trace_context,
        force=force
    )


def get_logging_config() -> Dict[str, Any]:
    """
    Get current logging configuration.

    Returns:
        Dictionary with current logging configuration
    """
    from .logging import _log_manager

    if _log_manager is None:
        return {"status": "not_initialized"}

    return {
        "status": "initialized",
        "log_level": _log_manager.log_level,
        "log_format": _log_manager.log_format,
        "log_file": _log_manager.log_file,
        "max_bytes": _log_manager.max_bytes,
        "backup_count": _log_manager.backup_count,
        "include_trace_context": _log_manager.include_trace_context,
        "initialized": _log_manager._initialized
    }
