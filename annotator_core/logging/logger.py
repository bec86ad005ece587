"""
Logging configuration and utilities.
"""

import inspect
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from annotator_core.config import Config


class JSONAwareFormatter(logging.Formatter):
    """
    Formatter that outputs a JSON line when the message contains structured data.
    Messages that are not JSON objects use the standard format.
    """

    def format(self, record):
        message = record.getMessage()
        if message.strip().startswith("{"):
            try:
                parsed = json.loads(message)
                log_entry = {
                    "severity": record.levelname,
                    "message": parsed.get("message", str(message)),
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                    "service": record.name,
                }
                for key, value in parsed.items():
                    if key != "message":
                        log_entry[key] = value
                return json.dumps(log_entry)
            except (json.JSONDecodeError, ValueError, TypeError, AttributeError):
                pass

        return super().format(record)


def setup_logger(
    service_name: Optional[str] = None, log_level: Optional[str] = None
) -> logging.Logger:
    """Setup and configure the root logger and return the service logger."""

    name = service_name or Config.SERVICE_NAME
    level = log_level or Config.LOG_LEVEL

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    formatter = JSONAwareFormatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # the host application may have configured a console handler already
    has_console_handler = any(
        isinstance(h, logging.StreamHandler) for h in root_logger.handlers
    )
    if not has_console_handler:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(getattr(logging, level.upper()))
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    return logging.getLogger(name)


def get_logger(name: str) -> logging.Logger:
    """Get or create a logger with the given name, setting up the root logger if needed."""
    if not logging.getLogger().handlers:
        setup_logger()
    return logging.getLogger(name)


class StructuredLogger:
    """
    Wrapper around logger that adds structured fields.
    Annotation events can then be filtered by image file and tool.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def _format_structured_message(
        self,
        message: str,
        file_path: Optional[str] = None,
        tool: Optional[str] = None,
        **kwargs,
    ) -> str:
        """
        Format message with structured fields.

        The tool name is prepended to the readable message. If any structured
        field is present the whole entry is emitted as JSON, which the
        JSONAwareFormatter turns into a single JSON log line.
        """
        formatted_message = message
        if tool:
            formatted_message = f"[{tool}] {message}"

        if file_path or tool or kwargs:
            structured_data: Dict[str, Any] = {
                "message": formatted_message,
            }
            if file_path:
                structured_data["file_path"] = file_path
            if tool:
                structured_data["tool"] = tool
            structured_data.update(kwargs)
            return json.dumps(structured_data, default=str)
        return formatted_message

    def debug(self, message: str, file_path: Optional[str] = None, tool: Optional[str] = None, **kwargs):
        """Log debug message with optional structured fields."""
        self.logger.debug(self._format_structured_message(message, file_path, tool, **kwargs))

    def info(self, message: str, file_path: Optional[str] = None, tool: Optional[str] = None, **kwargs):
        """Log info message with optional structured fields."""
        self.logger.info(self._format_structured_message(message, file_path, tool, **kwargs))

    def warning(self, message: str, file_path: Optional[str] = None, tool: Optional[str] = None, **kwargs):
        """Log warning message with optional structured fields."""
        self.logger.warning(self._format_structured_message(message, file_path, tool, **kwargs))

    def error(
        self,
        message: str,
        file_path: Optional[str] = None,
        tool: Optional[str] = None,
        exc_info: bool = False,
        **kwargs,
    ):
        """Log error message with optional structured fields."""
        self.logger.error(
            self._format_structured_message(message, file_path, tool, **kwargs),
            exc_info=exc_info,
        )

    def __getattr__(self, name: str):
        """Delegate other attributes to the underlying logger."""
        return getattr(self.logger, name)


def get_structured_logger(name: str) -> StructuredLogger:
    """
    Get a structured logger that supports file_path and tool fields.

    Usage:
        logger = get_structured_logger(__name__)
        logger.info("Removed 3 boxes", file_path="im.png", tool="Bbox")
    """
    return StructuredLogger(get_logger(name))


def _caller_module_name() -> str:
    # two frames up: the log_* helper and its caller
    frame = inspect.currentframe()
    try:
        caller_frame = frame.f_back.f_back
        return caller_frame.f_globals.get("__name__", "root")
    finally:
        del frame


def log_info(message: str, logger_name: Optional[str] = None, **kwargs):
    """
    Log an info message with optional structured fields.

    Args:
        message: The log message
        logger_name: Optional logger name (defaults to caller's module name)
        **kwargs: Structured fields, e.g. file_path or tool
    """
    if logger_name is None:
        logger_name = _caller_module_name()
    get_structured_logger(logger_name).info(message, **kwargs)


def log_warning(message: str, logger_name: Optional[str] = None, **kwargs):
    """Log a warning message with optional structured fields."""
    if logger_name is None:
        logger_name = _caller_module_name()
    get_structured_logger(logger_name).warning(message, **kwargs)


def log_error(message: str, logger_name: Optional[str] = None, exc_info: bool = False, **kwargs):
    """Log an error message with optional structured fields."""
    if logger_name is None:
        logger_name = _caller_module_name()
    get_structured_logger(logger_name).error(message, exc_info=exc_info, **kwargs)


def log_debug(message: str, logger_name: Optional[str] = None, **kwargs):
    """Log a debug message with optional structured fields."""
    if logger_name is None:
        logger_name = _caller_module_name()
    get_structured_logger(logger_name).debug(message, **kwargs)
