"""
Simple, standardized error handling for the application.

This module provides basic error handling utilities used throughout the
commands to ensure consistent error logging. Steps that the workflows treat
as optional (notifications, HTML reports, fastlane runs) go through
`best_effort`; everything else lets exceptions propagate to the CLI.
"""

import functools
from typing import Any, Callable, Tuple

import structlog

logger = structlog.get_logger(__name__)


def log_exception(func: Callable) -> Callable:
    """
    Decorator to log exceptions with full traceback information.

    This decorator ensures that any exception raised by the wrapped function
    is properly logged with traceback information before being re-raised.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except Exception as e:
            logger.error(
                f"Exception in {func.__name__}: {str(e)}",
                exc_info=True,
                func_name=func.__name__,
            )
            raise

    return wrapper


def best_effort(func: Callable, *args, **kwargs) -> Tuple[bool, Any]:
    """
    Call a function whose failure must not abort the surrounding workflow.

    Returns:
        tuple: (success: bool, result: Any)
            - If successful: (True, result)
            - If failed: (False, exception)
    """
    try:
        result = func(*args, **kwargs)
        return True, result
    except Exception as e:
        name = getattr(func, "__name__", repr(func))
        logger.warning(
            f"Best-effort step {name} failed: {str(e)}",
            func_name=name,
        )
        return False, e
