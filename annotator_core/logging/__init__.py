"""
Logging utilities for the annotation core.
"""

from .logger import setup_logger, get_logger, get_structured_logger, StructuredLogger, log_info, log_warning, log_error, log_debug

__all__ = ["setup_logger", "get_logger", "get_structured_logger", "StructuredLogger", "log_info", "log_warning", "log_error", "log_debug"]
