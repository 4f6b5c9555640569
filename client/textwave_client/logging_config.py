"""
Logging configuration for the TextWave client

The library itself only creates loggers. ``setup_logging`` is for applications
such as the ``textwave`` command line tool that want handlers and a format.
"""

import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone
from typing import Optional

from .exceptions import ConfigurationError


API_LOGGER_NAME = "textwave.api"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_log_level(log_level: Optional[str] = None) -> int:
    """
    Turn a level name into its numeric value, falling back to $LOG_LEVEL.

    Raises:
        ConfigurationError: If the name is not a registered logging level
    """
    if log_level is None:
        log_level = os.environ.get("LOG_LEVEL") or DEFAULT_LOG_LEVEL
    level = logging.getLevelName(log_level.strip().upper())
    if not isinstance(level, int):
        raise ConfigurationError(f"Unknown log level: {log_level!r}")
    return level


def setup_logging(log_level=None, log_file=None, max_bytes=10*1024*1024, backup_count=5):
    """
    Set up logging for an application using the TextWave client.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file (if None, logs to stderr)
        max_bytes: Maximum size of log file before rotation (default 10MB)
        backup_count: Number of backup log files to keep (default 5)
    """
    level = resolve_log_level(log_level)

    if log_file is None:
        log_file = os.environ.get('LOG_FILE')

    if log_file:
        handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count
        )
    else:
        # stdout carries command output
        handler = logging.StreamHandler(sys.stderr)

    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))

    # Existing handlers are only replaced once the new one could be built
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    logger = logging.getLogger(__name__)
    logger.debug(f"Logging initialized - Level: {logging.getLevelName(level)}, Output: {log_file or 'stderr'}")

    return logger


def get_logger(name):
    """Logger for a module of this package (usually called with __name__)"""
    return logging.getLogger(name)


def log_api_event(event_type: str, method: str, endpoint: str, status: Optional[int] = None,
                  code: Optional[str] = None, success: bool = True):
    """
    Log one API round trip as key=value pairs.

    Args:
        event_type: Type of event (e.g., 'api_response', 'api_error')
        method: HTTP method
        endpoint: Path relative to the base URL, query string included
        status: HTTP status code
        code: Machine-readable error code returned by the server
        success: Whether the call succeeded
    """
    logger = logging.getLogger(API_LOGGER_NAME)

    log_data = {
        'event_type': event_type,
        'method': method,
        'endpoint': endpoint,
        'success': success,
        'timestamp': datetime.now(timezone.utc).isoformat(),
    }

    if status is not None:
        log_data['status'] = status
    if code:
        log_data['code'] = code

    log_message = ' '.join([f"{k}={v}" for k, v in log_data.items()])

    if success:
        logger.info(f"API: {log_message}")
    else:
        logger.error(f"API: {log_message}")
