"""Scheduler implementations: Qt event loop and virtual clock."""

import heapq
import itertools
import logging
from typing import Callable, List, Optional, Tuple

from PyQt6.QtCore import QTimer

from pyqt_listview.protocols.scheduler import Scheduler, ScheduledCall

logger = logging.getLogger(__name__)


class QtScheduledCall(ScheduledCall):
    """Pending call backed by a single-shot QTimer."""

    def __init__(self, delay_ms: int, callback: Callable[[], None]):
        self._callback = callback
        self._timer: Optional[QTimer] = QTimer()
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._fire)
        self._timer.start(delay_ms)

    def _fire(self):
        if self._timer is None:
            return
        self._timer = None
        self._callback()

    def cancel(self):
        if self._timer is not None:
            self._timer.stop()
            self._timer = None

    @property
    def active(self) -> bool:
        return self._timer is not None


class QtScheduler(Scheduler):
    """
    Scheduler delivering callbacks through the Qt event loop.

    Requires a running QCoreApplication (or QApplication) for timers to fire.
    """

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledCall:
        return QtScheduledCall(max(0, int(delay_ms)), callback)


class VirtualScheduledCall(ScheduledCall):
    """Pending call on a VirtualClockScheduler."""

    def __init__(self, due_ms: int, callback: Callable[[], None]):
        self.due_ms = due_ms
        self._callback = callback
        self._active = True

    def cancel(self):
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def fire(self):
        if not self._active:
            return
        self._active = False
        self._callback()


class VirtualClockScheduler(Scheduler):
    """
    Deterministic scheduler driven by an explicit virtual clock.

    Nothing fires until advance() moves the clock past a call's due time.
    Calls due at the same instant fire in the order they were scheduled.

    Usage:
        clock = VirtualClockScheduler()
        view = create_view(items, config, scheduler=clock)
        view.set_search_term("a")
        clock.advance(500)  # debounced term commits here
    """

    def __init__(self, start_ms: int = 0):
        self.now_ms = start_ms
        self._queue: List[Tuple[int, int, VirtualScheduledCall]] = []
        self._sequence = itertools.count()

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledCall:
        call = VirtualScheduledCall(self.now_ms + max(0, int(delay_ms)), callback)
        heapq.heappush(self._queue, (call.due_ms, next(self._sequence), call))
        return call

    def advance(self, delta_ms: int) -> int:
        """
        Move the clock forward, firing every call that becomes due.

        Callbacks scheduled while advancing fire too if they fall due
        before the target time.

        Returns:
            Number of callbacks fired
        """
        if delta_ms < 0:
            raise ValueError(f"Cannot move virtual clock backwards: {delta_ms}")

        target = self.now_ms + delta_ms
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due_ms, _, call = heapq.heappop(self._queue)
            if not call.active:
                continue
            self.now_ms = due_ms
            call.fire()
            fired += 1
        self.now_ms = target
        logger.debug(f"Virtual clock at {self.now_ms}ms, fired {fired} call(s)")
        return fired

    def pending_count(self) -> int:
        """Number of scheduled calls that are still active."""
        return sum(1 for _, _, call in self._queue if call.active)
