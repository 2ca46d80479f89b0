"""
Scheduler contracts for deferred callbacks.

Defines the schedule/cancel primitive that debounce timers are built on,
so the view pipeline never depends on a specific event loop. The Qt event
loop and a virtual clock both implement it (see core.scheduler).
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional


class ScheduledCall(ABC):
    """
    ABC for a single pending callback returned by a Scheduler.

    A call fires at most once. Cancelling a call that already fired or was
    already cancelled is a no-op.
    """

    @abstractmethod
    def cancel(self) -> None:
        """Cancel the call if it has not fired yet."""
        pass

    @property
    @abstractmethod
    def active(self) -> bool:
        """True while the call is scheduled and has neither fired nor been cancelled."""
        pass


class Scheduler(ABC):
    """
    ABC for single-threaded deferred execution.

    Callbacks run on the same logical thread that scheduled them, serialized
    with every other event the scheduler delivers.
    """

    @abstractmethod
    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledCall:
        """
        Schedule callback to run once after delay_ms.

        Args:
            delay_ms: Delay in milliseconds (>= 0)
            callback: Zero-argument callable

        Returns:
            Handle that can cancel the pending call
        """
        pass


# Global default scheduler (set by application)
_default_scheduler: Optional[Scheduler] = None


def register_default_scheduler(scheduler: Optional[Scheduler]) -> None:
    """Register the scheduler used by views created without an explicit one.

    Args:
        scheduler: Scheduler instance, or None to restore the Qt default
    """
    global _default_scheduler
    _default_scheduler = scheduler


def get_default_scheduler() -> Optional[Scheduler]:
    """Get the registered default scheduler.

    Returns:
        Registered scheduler or None if not registered
    """
    return _default_scheduler
