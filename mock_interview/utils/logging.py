"""Logging utilities for the Mock Interview system."""

import json
import logging
import logging.handlers
import sys
from contextvars import ContextVar
from datetime import datetime
from pathlib import Path
from typing import Optional

# Correlation ID context; holds the active session id while an interview runs
correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")

_RESERVED_ATTRS = {
    "name", "msg", "args", "levelname", "levelno", "pathname",
    "filename", "module", "lineno", "funcName", "created",
    "msecs", "relativeCreated", "thread", "threadName", "taskName",
    "processName", "process", "getMessage", "exc_info",
    "exc_text", "stack_info", "correlation_id",
}


class CorrelationIdFilter(logging.Filter):
    """Log filter to add correlation ID to log records."""

    def filter(self, record):
        """Add correlation ID to log record."""
        record.correlation_id = correlation_id.get()
        return True


class StructuredFormatter(logging.Formatter):
    """Structured log formatter for machine-readable logs."""

    def format(self, record):
        """Format log record as structured JSON."""
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", ""),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        # Extra fields passed through ``extra=``
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_entry[key] = value

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class HumanReadableFormatter(logging.Formatter):
    """Human-readable log formatter for console output."""

    def format(self, record):
        """Format log record for human reading."""
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        level = record.levelname.ljust(8)
        logger_name = record.name.ljust(25)
        session_id = getattr(record, "correlation_id", "")
        correlation_str = f"[{session_id}] " if session_id else ""

        message = record.getMessage()

        if record.exc_info:
            message += f"\n{self.formatException(record.exc_info)}"

        return f"{timestamp} | {level} | {logger_name} | {correlation_str}{message}"


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    enable_console: bool = True,
    enable_file: bool = False,
    structured: bool = False,
    max_file_size: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5
) -> None:
    """Setup logging configuration for the Mock Interview system.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file
        enable_console: Enable console logging
        enable_file: Enable file logging
        structured: Use structured JSON logging
        max_file_size: Maximum log file size in bytes
        backup_count: Number of backup log files to keep
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    formatter = StructuredFormatter() if structured else HumanReadableFormatter()
    correlation_filter = CorrelationIdFilter()

    if enable_console:
        # stderr keeps the interactive CLI output on stdout clean
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        console_handler.addFilter(correlation_filter)
        root_logger.addHandler(console_handler)

    if enable_file and log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_file_size,
            backupCount=backup_count,
            encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        file_handler.addFilter(correlation_filter)
        root_logger.addHandler(file_handler)

    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    startup_logger = logging.getLogger("startup")
    startup_logger.info("Logging system initialized", extra={
        "level": level,
        "console_enabled": enable_console,
        "file_enabled": enable_file,
        "structured": structured
    })


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


def set_correlation_id(correlation_id_value: str) -> None:
    """Set correlation ID for current context.

    Args:
        correlation_id_value: Correlation ID value
    """
    correlation_id.set(correlation_id_value)


def get_correlation_id() -> str:
    """Get current correlation ID.

    Returns:
        Current correlation ID or empty string if not set
    """
    return correlation_id.get()


def log_error(error: Exception, context: Optional[dict] = None, level: str = "ERROR") -> None:
    """Log error with context and correlation ID.

    Args:
        error: Exception to log
        context: Additional context information
        level: Log level for the error
    """
    logger = get_logger("error")
    extra = {
        "error_type": type(error).__name__,
        "error_message": str(error),
    }

    if context:
        extra.update(context)

    log_method = getattr(logger, level.lower())
    log_method(f"Error occurred: {error}", extra=extra, exc_info=error)
