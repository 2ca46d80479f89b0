"""
Core utilities.

Schedulers, debouncing, field access, sorting helpers and performance
timing. No view-specific logic lives here.
"""

from .scheduler import QtScheduler, VirtualClockScheduler
from .debounce_timer import DebounceTimer, DebouncedValue
from .field_utils import resolve_field
from .sort_utils import (
    natural_sort,
    stable_sorted,
    text_comparator,
    number_comparator,
    timestamp_comparator,
)
from .performance_monitor import PerformanceMonitor, get_monitor, timed, timer

__all__ = [
    "QtScheduler",
    "VirtualClockScheduler",
    "DebounceTimer",
    "DebouncedValue",
    "resolve_field",
    "natural_sort",
    "stable_sorted",
    "text_comparator",
    "number_comparator",
    "timestamp_comparator",
    "PerformanceMonitor",
    "get_monitor",
    "timed",
    "timer",
]
