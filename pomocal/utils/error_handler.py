"""Shared error-handling helpers.

Best-effort operations (notifications, background refreshes, token file
writes) log their failure and hand back a default instead of raising.
"""

import functools
import inspect
from collections.abc import Callable
from typing import Any, TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")


class ErrorHandler:
    """Logging patterns shared by the decorators below."""

    @staticmethod
    def log_and_return_default(
        operation_name: str,
        exception: Exception,
        default_value: T,
        level: str = "error",
        **kwargs: Any,
    ) -> T:
        """Log the failure and return ``default_value``."""
        log = getattr(logger, level, logger.error)
        log(f"Failed to {operation_name}", error=str(exception), **kwargs)
        return default_value

    @staticmethod
    def log_and_reraise(
        operation_name: str, exception: Exception, **kwargs: Any
    ) -> None:
        """Log the failure, then re-raise the original exception."""
        logger.error(f"Failed to {operation_name}", error=str(exception), **kwargs)
        raise exception


def handle_errors(
    operation_name: str,
    default_return: Any = None,
    reraise: bool = False,
    level: str = "error",
    **log_kwargs: Any,
):
    """
    Decorator that logs exceptions raised by sync or async callables.

    Args:
        operation_name: name used in the log message
        default_return: value returned when the call fails
        reraise: re-raise after logging instead of returning the default
        level: structlog method used for the log line
        **log_kwargs: extra key/values bound to the log line
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                if reraise:
                    ErrorHandler.log_and_reraise(operation_name, e, **log_kwargs)
                return ErrorHandler.log_and_return_default(
                    operation_name, e, default_return, level, **log_kwargs
                )

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                if reraise:
                    ErrorHandler.log_and_reraise(operation_name, e, **log_kwargs)
                return ErrorHandler.log_and_return_default(
                    operation_name, e, default_return, level, **log_kwargs
                )

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return wrapper

    return decorator


def safe_operation(operation_name: str, **log_kwargs: Any):
    """Return None on failure."""
    return handle_errors(operation_name, default_return=None, **log_kwargs)


def safe_with_default(operation_name: str, default_value: Any, **log_kwargs: Any):
    """Return ``default_value`` on failure."""
    return handle_errors(operation_name, default_return=default_value, **log_kwargs)
