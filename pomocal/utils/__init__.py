"""Utility modules for pomocal"""

from .logger import get_logger, sanitize_log_content, setup_logging
from .mixins import LoggerMixin

__all__ = [
    "LoggerMixin",
    "get_logger",
    "sanitize_log_content",
    "setup_logging",
]
