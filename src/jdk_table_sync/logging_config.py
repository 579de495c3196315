"""
Logging Configuration for the JDK table sync loop.

Provides centralized logger setup for the sync trace log.
The trace logger writes to a file in the auto-detected log directory
and to stderr.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

TRACE_LOGGER_NAME = "jdk_sync.trace"
TRACE_LOG_FILENAME = "sync_trace.log"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


# Log directory priority:
# 1. JDK_SYNC_LOG_DIR (explicit)
# 2. JDK_SYNC_PROJECT_ROOT/.jdk_table_sync (if set)
# 3. CWD/.jdk_table_sync (fallback)
def _get_log_directory() -> Path:
    """Get the log directory path."""
    log_dir = os.getenv("JDK_SYNC_LOG_DIR")
    if not log_dir:
        project_root = os.getenv("JDK_SYNC_PROJECT_ROOT")
        if project_root:
            log_dir = str(Path(project_root) / ".jdk_table_sync")
        else:
            log_dir = str(Path.cwd() / ".jdk_table_sync")
    return Path(log_dir)


def _ensure_log_directory() -> Path:
    """Ensure log directory exists and return its path."""
    log_dir = _get_log_directory()
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def _debug_log_enabled() -> bool:
    """File logging is on unless JDK_SYNC_DEBUG_LOG is set to an empty string."""
    value = os.getenv("JDK_SYNC_DEBUG_LOG")
    return value is None or value != ""


def _create_file_handler(log_filename: str) -> Optional[logging.FileHandler]:
    """
    Create a file handler for the specified log file.

    Args:
        log_filename: Name of the log file (e.g., 'sync_trace.log')

    Returns:
        Configured FileHandler, or None if file logging is disabled or the
        directory cannot be created
    """
    if not _debug_log_enabled():
        return None

    try:
        log_dir = _ensure_log_directory()
        handler = logging.FileHandler(log_dir / log_filename, mode='a', encoding='utf-8')
    except OSError:
        return None
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


class FlushingStreamHandler(logging.StreamHandler):
    """StreamHandler that flushes after every emit.

    ::: This is-in-layer Infrastructure-Layer.
    ::: This is a handler.
    ::: This is-in-process Main-Process.
    ::: This is stateless.
    """
    def emit(self, record):
        super().emit(record)
        self.flush()


def _create_stderr_handler() -> logging.StreamHandler:
    """Create a stderr handler for console output with auto-flush."""
    handler = FlushingStreamHandler(sys.stderr)
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def _install_handlers(logger: logging.Logger) -> None:
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    file_handler = _create_file_handler(TRACE_LOG_FILENAME)
    if file_handler:
        logger.addHandler(file_handler)

    logger.addHandler(_create_stderr_handler())


def get_sync_trace_logger() -> logging.Logger:
    """
    Get the trace logger for the detection/reconciliation loop.

    Output goes to .jdk_table_sync/sync_trace.log and stderr.

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(TRACE_LOGGER_NAME)

    # Only configure once
    if not logger.handlers:
        _install_handlers(logger)

    return logger


sync_trace_logger = get_sync_trace_logger()


def configure_logger_for_sync_trace(logger_name: str) -> logging.Logger:
    """
    Configure a logger to also write to sync_trace.log.

    Args:
        logger_name: Name of the logger to configure (e.g., __name__)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    for handler in sync_trace_logger.handlers:
        if handler not in logger.handlers:
            logger.addHandler(handler)
    return logger


def reconfigure_log_directory() -> None:
    """
    Re-point the trace handlers after JDK_SYNC_PROJECT_ROOT or JDK_SYNC_LOG_DIR
    changed (the CLI sets them after import).

    Loggers previously configured via configure_logger_for_sync_trace() are
    switched over to the new handlers as well.
    """
    old_handlers = list(sync_trace_logger.handlers)
    for handler in old_handlers:
        sync_trace_logger.removeHandler(handler)
    _install_handlers(sync_trace_logger)

    for logger in logging.Logger.manager.loggerDict.values():
        if not isinstance(logger, logging.Logger) or logger is sync_trace_logger:
            continue
        if not any(h in logger.handlers for h in old_handlers):
            continue
        for handler in old_handlers:
            if handler in logger.handlers:
                logger.removeHandler(handler)
        for handler in sync_trace_logger.handlers:
            logger.addHandler(handler)

    for handler in old_handlers:
        handler.close()


def _stderr_handlers():
    for handler in sync_trace_logger.handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
            yield handler


def suppress_stderr_logging():
    """
    Suppress stderr logging for the trace logger.

    Call this while the rich status view is live to avoid log spam in the
    console. File logging continues to work normally.
    """
    for handler in _stderr_handlers():
        handler.setLevel(logging.CRITICAL + 1)  # Effectively disable


def restore_stderr_logging(level: int = logging.INFO):
    """
    Restore stderr logging for the trace logger.

    Args:
        level: Level to restore the stderr handlers to
    """
    for handler in _stderr_handlers():
        handler.setLevel(level)
