"""Performance logging decorator."""

import asyncio
import functools
import time
from collections.abc import Callable
from typing import Any

from loguru import logger


class PerformanceLogger:
    """Log duration and outcome of the wrapped callable."""

    def __init__(self, operation: str):
        self.operation = operation

    def __call__(self, func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            start_time = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                self._log_failure(start_time, e)
                raise
            self._log_success(start_time)
            return result

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                self._log_failure(start_time, e)
                raise
            self._log_success(start_time)
            return result

        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    def _log_success(self, start_time: float) -> None:
        logger.bind(
            operation=self.operation,
            duration_ms=_elapsed_ms(start_time),
            status="success",
        ).info(f"{self.operation} completed")

    def _log_failure(self, start_time: float, error: Exception) -> None:
        logger.bind(
            operation=self.operation,
            duration_ms=_elapsed_ms(start_time),
            status="error",
            error=str(error),
        ).error(f"{self.operation} failed")


def _elapsed_ms(start_time: float) -> float:
    return round((time.perf_counter() - start_time) * 1000, 2)
