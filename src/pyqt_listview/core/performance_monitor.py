"""Performance monitoring utilities for pyqt-listview.

Provides a context manager and accumulating monitors for timing pipeline
stages and logging performance metrics.
"""

import time
import logging
import functools
from collections import deque
from contextlib import contextmanager
from typing import Callable, Deque, Dict, Optional
from pathlib import Path

from pyqt_listview.protocols import get_listview_config

# Create performance logger
_config = get_listview_config()
perf_logger = logging.getLogger(_config.performance_logger_name)
perf_logger.setLevel(logging.DEBUG)

# File handler only when the application configured a log directory
if _config.log_dir:
    perf_log_file = Path(_config.log_dir) / _config.performance_log_filename
    perf_log_file.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(perf_log_file)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    ))
    perf_logger.addHandler(file_handler)


@contextmanager
def timer(operation_name: str, threshold_ms: float = 0.0, log_args: bool = False, **kwargs):
    """Context manager for timing operations.

    Args:
        operation_name: Name of the operation being timed
        threshold_ms: Only log if operation takes longer than this (in milliseconds)
        log_args: Whether to log kwargs in the message
        **kwargs: Additional context to include in log message

    Example:
        with timer("Filter stage", threshold_ms=10.0, log_args=True, records=5000):
            matched = service.filter(items, term, selections)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000

        if elapsed_ms >= threshold_ms:
            msg = f"{operation_name}: {elapsed_ms:.2f}ms"
            if log_args and kwargs:
                args_str = ", ".join(f"{k}={v}" for k, v in kwargs.items())
                msg += f" ({args_str})"

            perf_logger.debug(msg)


def timed(operation_name: Optional[str] = None, threshold_ms: float = 0.0):
    """Decorator for timing function calls.

    Args:
        operation_name: Name for the operation (defaults to function name)
        threshold_ms: Only log if operation takes longer than this (in milliseconds)

    Example:
        @timed("Derive filter choices", threshold_ms=5.0)
        def distinct_values(collection, field_ref):
            ...
    """
    def decorator(func: Callable) -> Callable:
        name = operation_name or f"{func.__module__}.{func.__qualname__}"

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                elapsed_ms = (time.perf_counter() - start) * 1000
                if elapsed_ms >= threshold_ms:
                    perf_logger.debug(f"{name}: {elapsed_ms:.2f}ms")

        return wrapper
    return decorator


class PerformanceMonitor:
    """Accumulates timing statistics for repeated operations.

    Only the last max_samples timings are kept; count, total, min and max
    cover every measurement since the last reset.

    Example:
        monitor = PerformanceMonitor("Sort stage")

        with monitor.measure():
            ordered = ordering.sort(matched, "price")

        monitor.report()  # Logs summary statistics
    """

    def __init__(self, operation_name: str, max_samples: int = 1000):
        self.operation_name = operation_name
        self.timings: Deque[float] = deque(maxlen=max_samples)
        self._count = 0
        self._total_ms = 0.0
        self._min_ms = float("inf")
        self._max_ms = 0.0

    @contextmanager
    def measure(self):
        """Measure a single operation."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self.record((time.perf_counter() - start) * 1000)

    def record(self, elapsed_ms: float) -> None:
        self.timings.append(elapsed_ms)
        self._count += 1
        self._total_ms += elapsed_ms
        self._min_ms = min(self._min_ms, elapsed_ms)
        self._max_ms = max(self._max_ms, elapsed_ms)

    @property
    def count(self) -> int:
        return self._count

    @property
    def total_ms(self) -> float:
        return self._total_ms

    def report(self, log_individual: bool = False):
        """Log summary statistics.

        Args:
            log_individual: Whether to log each retained timing
        """
        if not self._count:
            perf_logger.debug(f"{self.operation_name}: No measurements")
            return

        perf_logger.debug(
            f"{self.operation_name} - "
            f"Count: {self._count}, "
            f"Total: {self._total_ms:.2f}ms, "
            f"Avg: {self._total_ms / self._count:.2f}ms, "
            f"Min: {self._min_ms:.2f}ms, "
            f"Max: {self._max_ms:.2f}ms"
        )

        if log_individual:
            for i, timing in enumerate(self.timings, 1):
                perf_logger.debug(f"  #{i}: {timing:.2f}ms")

    def reset(self):
        """Clear all timings."""
        self.timings.clear()
        self._count = 0
        self._total_ms = 0.0
        self._min_ms = float("inf")
        self._max_ms = 0.0


# Global monitors for common operations
_monitors: Dict[str, PerformanceMonitor] = {}


def get_monitor(operation_name: str) -> PerformanceMonitor:
    """Get or create a global monitor for an operation."""
    if operation_name not in _monitors:
        _monitors[operation_name] = PerformanceMonitor(operation_name)
    return _monitors[operation_name]

