"""
Failure logging for repository operations.

Every repository operation follows the same policy: log one
operation-specific message, then surface the original exception to the
caller. No retries, no wrapping into another exception type.
"""

import functools
from typing import Any, Callable, Optional

from chatdb.core.logging_config import get_logger

logger = get_logger(__name__)


def log_failures(message: str, operation: Optional[str] = None) -> Callable:
    """
    Decorator that logs a failed async operation and re-raises the error.

    Args:
        message: Human-readable description logged at ERROR level when the
            wrapped coroutine raises
        operation: Name recorded as ``operation`` on the log record;
            defaults to the wrapped function name

    Returns:
        Decorated async function with identical results and exceptions

    Example:
        @log_failures("Failed to get user from database")
        async def get_user(self, email: str) -> List[User]:
            ...

    Note:
        - The exception object is re-raised unchanged (same type, same
          instance, original traceback)
        - The log record carries ``operation`` (the function name unless
          given)
    """
    def decorator(func: Callable) -> Callable:
        name = operation or func.__name__

        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            try:
                return await func(*args, **kwargs)
            except Exception:
                logger.error(
                    message,
                    exc_info=True,
                    extra={"operation": name},
                )
                raise

        return wrapper

    return decorator
