"""
Centralized logging configuration for the print quote engine.

Every record carries the name of the thread that produced it. The engine
itself is synchronous, but the Flask server may price orders from several
request threads at once, and the thread name is what ties a DEBUG trace of
tier lookups and printer optimization back to the request that caused it.

Features:
    - Thread name in all log messages
    - Console output (always enabled)
    - Rotating file logs (optional, for production)
    - Separate error log for ERROR/CRITICAL messages
    - Helper functions for getting loggers with consistent naming

Log Format:
    2025-12-03 10:15:30 [INFO    ] [MainThread] print_quote_engine.app - Starting application
    2025-12-03 10:15:31 [DEBUG   ] [Thread-3] print_quote_engine.modules.engine - Priced order: 2 items
    2025-12-03 10:15:32 [INFO    ] [Thread-4] print_quote_engine.quote.a1b2c3d4 - Quote saved

Usage:
    # At application startup
    from logging_config import setup_logging, get_logger

    setup_logging(log_level=logging.INFO, enable_file_logging=True)

    # In modules
    logger = get_logger(__name__)
    logger.debug("Print tier selected")

    # For a specific saved quote
    quote_logger = get_quote_logger("quote-1733212345")
"""

import logging
import sys
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


APP_LOGGER_NAME = "print_quote_engine"


# =============================================================================
# THREAD CONTEXT FILTER
# =============================================================================

class ThreadContextFilter(logging.Filter):
    """
    Logging filter that adds thread context to all log records.

    Adds ``thread_name`` and ``thread_id`` to each record for use in the
    format string.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        current_thread = threading.current_thread()
        record.thread_name = current_thread.name
        record.thread_id = threading.get_ident()

        # Context only, never drops a record
        return True


# =============================================================================
# LOGGING SETUP
# =============================================================================

def _rotating_handler(
    path: Path,
    level: int,
    formatter: logging.Formatter,
    thread_filter: logging.Filter,
) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        filename=path,
        maxBytes=10 * 1024 * 1024,  # 10 MB per file
        backupCount=5,
        encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    handler.addFilter(thread_filter)
    return handler


def setup_logging(
    app_name: str = APP_LOGGER_NAME,
    log_level: int = logging.INFO,
    log_dir: Optional[Path] = None,
    enable_file_logging: bool = True,
) -> logging.Logger:
    """
    Configure application logging with thread context.

    This sets up:
    1. Console handler (always enabled)
    2. Rotating file handler (optional) - all levels
    3. Error file handler (optional) - ERROR/CRITICAL only

    Args:
        app_name: Name of the root logger (default: "print_quote_engine")
        log_level: Minimum log level (default: INFO)
        log_dir: Directory for log files (default: ./logs relative to this file)
        enable_file_logging: Whether to write to log files (default: True)

    Returns:
        Configured root logger instance
    """
    logger = logging.getLogger(app_name)
    logger.setLevel(log_level)
    logger.propagate = False  # Prevent duplicate logs to root logger

    # Allows re-configuration (app factory may run more than once in tests)
    logger.handlers.clear()

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)-8s] [%(thread_name)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    thread_filter = ThreadContextFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(thread_filter)
    logger.addHandler(console_handler)

    if enable_file_logging:
        if log_dir is None:
            log_dir = Path(__file__).parent / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)

        app_log_file = log_dir / f"{app_name}.log"
        logger.addHandler(
            _rotating_handler(app_log_file, log_level, formatter, thread_filter)
        )
        logger.addHandler(
            _rotating_handler(
                log_dir / f"{app_name}_error.log", logging.ERROR, formatter, thread_filter
            )
        )

        logger.info(f"File logging enabled: {app_log_file}")

    logger.info(f"Logging configured at level {logging.getLevelName(log_level)}")
    return logger


# =============================================================================
# LOGGER FACTORY FUNCTIONS
# =============================================================================

def get_logger(name: str) -> logging.Logger:
    """
    Get a child logger with the application namespace.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger instance, e.g. "print_quote_engine.modules.engine"
    """
    if not name.startswith(APP_LOGGER_NAME):
        name = f"{APP_LOGGER_NAME}.{name}"

    return logging.getLogger(name)


def get_quote_logger(quote_id: str) -> logging.Logger:
    """
    Get a logger for a specific saved quote.

    Quote ids look like "quote-<millis>"; the prefix is dropped and the
    last 8 characters are kept so log lines stay short but filterable.

    Args:
        quote_id: Saved quote identifier

    Returns:
        Logger named "print_quote_engine.quote.<short id>"
    """
    short_id = quote_id.replace("quote-", "")[-8:] or quote_id
    return logging.getLogger(f"{APP_LOGGER_NAME}.quote.{short_id}")
