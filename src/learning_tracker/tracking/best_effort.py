"""Decorator for non-critical async operations.

Activity logging and streak reads are auxiliary to whatever the user is
actually doing. A failure in them is logged but never propagated: the
decorated coroutine returns its default instead.
"""

import functools
import logging
from typing import Any, Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def best_effort(default: Any = None, *, action: str):
    """Swallow and log any ``Exception`` raised by the wrapped coroutine.

    Args:
        default: Value returned on failure. Callables are invoked to build a
            fresh default for every failure.
        action: Short name of the operation, used in the log line.
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except Exception:
                logger.exception("Best-effort %s failed", action)
                return default() if callable(default) else default

        return wrapper

    return decorator
