"""Decorator utilities for cross-cutting concerns."""
import functools
import logging
import time
from typing import Any, Callable, TypeVar, cast

# Setup logging
logger = logging.getLogger(__name__)

F = TypeVar('F', bound=Callable[..., Any])


def log_execution_time(func: F) -> F:
    """Decorator to log how long a store call took.

    Args:
        func: The function to decorate

    Returns:
        Decorated function that logs execution time, or the failure and its duration
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            duration = time.perf_counter() - start_time
            logger.error(f"{func.__qualname__} failed after {duration:.3f}s: {str(e)}")
            raise
        duration = time.perf_counter() - start_time
        logger.debug(f"{func.__qualname__} completed in {duration:.3f}s")
        return result
    return cast(F, wrapper)
