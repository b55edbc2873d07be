"""
Timing helpers for engine computations.
"""

import functools
import logging
import time
from typing import Any, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PerformanceTimer:
    """
    Time a block and log its duration.

    Usage:
        with PerformanceTimer("fill_volume 1+210.00 - 1+219.00") as timer:
            fill = integrator.fill_volume(1210.0, 1219.0)
        timer.duration_ms

    Attributes:
        operation_name: Label used in the log message
        log_level: Level the duration is logged at
        threshold_ms: Only log blocks at least this slow (all if None)
        duration_ms: Measured duration, set when the block exits
    """

    def __init__(
        self,
        operation_name: str,
        log_level: int = logging.INFO,
        threshold_ms: Optional[float] = None,
        verb: str = "completed",
    ):
        self.operation_name = operation_name
        self.log_level = log_level
        self.threshold_ms = threshold_ms
        self.verb = verb
        self.duration_ms: Optional[float] = None
        self._started: Optional[float] = None

    def __enter__(self) -> "PerformanceTimer":
        self._started = time.perf_counter()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._started is None:
            return
        self.duration_ms = (time.perf_counter() - self._started) * 1000

        if self.threshold_ms is not None and self.duration_ms < self.threshold_ms:
            return
        logger.log(
            self.log_level,
            f"{self.operation_name} {self.verb} in {self.duration_ms:.2f}ms",
            extra={"duration_ms": self.duration_ms, "operation": self.operation_name},
        )


def log_performance(
    log_level: int = logging.INFO,
    threshold_ms: Optional[float] = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorator logging how long each call takes.

    Args:
        log_level: Level the duration is logged at
        threshold_ms: Only log calls at least this slow (all if None)

    Example:
        @log_performance(log_level=logging.DEBUG)
        def forecast(self, entries):
            ...
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        name = f"{func.__module__}.{func.__qualname__}"

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            with PerformanceTimer(name, log_level, threshold_ms, verb="executed"):
                return func(*args, **kwargs)

        return wrapper

    return decorator
