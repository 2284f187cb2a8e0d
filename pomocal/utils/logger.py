"""
Logging configuration for pomocal
"""

import logging
import re
from typing import cast

import structlog
from rich.console import Console
from rich.logging import RichHandler

from pomocal.config import Settings, get_settings

LOG_FILE_NAME = "pomocal.log"

_SENSITIVE_PATTERNS = [
    r'(access_token|refresh_token|id_token)["\']?\s*[=:]\s*["\']?[\w\-\.\/]+["\']?',
    r'(client_secret|code)["\']?\s*[=:]\s*["\']?[\w\-\.\/]+["\']?',
    r"Bearer\s+[\w\-\.]+",
    r"\bya29\.[\w\-\.]+",  # Google access tokens
]


def setup_logging(settings: Settings | None = None) -> None:
    """Set up structured logging with rich formatting"""

    settings = settings or get_settings()

    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logs_dir = settings.log_dir
    logs_dir.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=Console(stderr=True),
                show_time=True,
                show_path=True,
                markup=False,
                rich_tracebacks=True,
            ),
            logging.FileHandler(logs_dir / LOG_FILE_NAME, encoding="utf-8"),
        ],
        force=True,
    )

    # uvicorn installs its own handlers; route them through ours
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).handlers.clear()
        logging.getLogger(name).propagate = True

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            (
                structlog.processors.JSONRenderer()
                if settings.log_format == "json"
                else structlog.dev.ConsoleRenderer(colors=False)
            ),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance"""
    logger = structlog.get_logger(name)
    return cast("structlog.stdlib.BoundLogger", logger)


def sanitize_log_content(content: str, max_length: int = 200) -> str:
    """Mask OAuth secrets in upstream payloads before they reach the logs."""
    sanitized = content
    for pattern in _SENSITIVE_PATTERNS:
        sanitized = re.sub(pattern, "[REDACTED]", sanitized, flags=re.IGNORECASE)

    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length] + "..."

    return sanitized
