"""Reusable trailing debounce timer and debounced value holder."""

import logging
from typing import Callable, Optional

from pyqt_listview.protocols.scheduler import Scheduler, ScheduledCall, get_default_scheduler

logger = logging.getLogger(__name__)


def resolve_scheduler(scheduler: Optional[Scheduler] = None) -> Scheduler:
    """Return scheduler, the registered default, or a new QtScheduler."""
    if scheduler is not None:
        return scheduler
    default = get_default_scheduler()
    if default is not None:
        return default
    from pyqt_listview.core.scheduler import QtScheduler
    return QtScheduler()


class DebounceTimer:
    """
    Reusable trailing debounce timer.

    Restarts timer on each call. Handler fires only after delay_ms of inactivity.
    At most one call is pending at any time.

    Usage:
        self._debounce = DebounceTimer(delay_ms=200, handler=self._do_update)

        def on_text_changed(self):
            self._debounce.trigger()  # Restarts timer
    """

    def __init__(self, delay_ms: int, handler: Callable[[], None],
                 scheduler: Optional[Scheduler] = None):
        self._delay_ms = delay_ms
        self._handler = handler
        self._scheduler = resolve_scheduler(scheduler)
        self._call: Optional[ScheduledCall] = None

    @property
    def delay_ms(self) -> int:
        return self._delay_ms

    @property
    def pending(self) -> bool:
        """True while a trigger is waiting to fire."""
        return self._call is not None and self._call.active

    def trigger(self):
        """Trigger debounce, restarting the timer."""
        if self._call is not None:
            self._call.cancel()

        self._call = self._scheduler.schedule(self._delay_ms, self._fire)

    def _fire(self):
        self._call = None
        self._handler()

    def cancel(self):
        """Cancel pending trigger."""
        if self._call is not None:
            self._call.cancel()
            self._call = None

    def force(self):
        """Cancel timer and fire handler immediately."""
        self.cancel()
        self._handler()


class DebouncedValue:
    """
    Text value committed only after a quiet period.

    set() records the raw value on every keystroke; the committed value
    catches up delay_ms after the last set(). on_commit is called with the
    new committed value whenever it actually changes.

    Usage:
        self._search = DebouncedValue(500, on_commit=self._on_search_committed)

        def on_text_changed(self, text):
            self._search.set(text)

        def on_clear_clicked(self):
            self._search.commit_now("")  # Bypasses the timer
    """

    def __init__(self, delay_ms: int, on_commit: Callable[[str], None],
                 scheduler: Optional[Scheduler] = None, initial: str = ""):
        self.raw = initial
        self.committed = initial
        self._on_commit = on_commit
        self._closed = False
        self._timer = DebounceTimer(delay_ms, self._commit_raw, scheduler)

    @property
    def pending(self) -> bool:
        return self._timer.pending

    def set(self, raw: str) -> None:
        """Record a raw update and restart the quiet period."""
        if self._closed:
            logger.debug(f"Ignoring update on closed debounced value: {raw!r}")
            return
        self.raw = raw
        self._timer.trigger()

    def commit_now(self, value: str) -> None:
        """Cancel any pending timer and commit value immediately."""
        if self._closed:
            return
        self._timer.cancel()
        self.raw = value
        self._commit(value)

    def flush(self) -> None:
        """Commit a pending raw value immediately. No-op when nothing is pending."""
        if self._timer.pending:
            self._timer.force()

    def close(self) -> None:
        """Cancel any pending timer. Later updates are ignored."""
        self._timer.cancel()
        self._closed = True

    def _commit_raw(self):
        self._commit(self.raw)

    def _commit(self, value: str):
        if value == self.committed:
            return
        self.committed = value
        logger.debug(f"Committed debounced value {value!r}")
        self._on_commit(value)
