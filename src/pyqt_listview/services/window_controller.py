"""Windowing controller: a growable prefix of an ordered result."""

import logging
from typing import Generic, Optional, Sequence, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


def window(ordered: Sequence[T], size: int) -> Tuple[T, ...]:
    """Return the first size records of ordered (size clamped to >= 0)."""
    return tuple(ordered[:max(0, size)])


class WindowController(Generic[T]):
    """
    Tracks how much of an ordered result is visible.

    The window starts at initial_size, grows by step on "load more", and
    snaps back to initial_size on reset() or when bound to a different
    ordered result, so a window sized for an old result is never applied
    to a new one.

    Usage:
        controller = WindowController(initial_size=50)
        controller.bind(ordered)
        visible = controller.window(ordered)
        controller.grow()
    """

    def __init__(self, initial_size: int, step: Optional[int] = None):
        self.initial_size = max(1, initial_size)
        self.step = step if step is not None and step >= 1 else self.initial_size
        self.size = self.initial_size
        self._bound: Optional[Sequence[T]] = None
        self._limit = self.initial_size
        self._cached_for: Optional[Tuple[int, int]] = None
        self._cached_window: Tuple[T, ...] = ()

    def bind(self, ordered: Sequence[T]) -> None:
        """Attach to ordered; a different result object resets the window."""
        if ordered is not self._bound:
            if self._bound is not None:
                self.reset()
            self._bound = ordered
            self._cached_for = None
        self._limit = max(len(ordered), self.initial_size)

    def grow(self, step: Optional[int] = None) -> int:
        """Enlarge the window, clamped to the bound result. Returns the new size."""
        increment = step if step is not None else self.step
        if increment < 1:
            return self.size
        self.size = min(self.size + increment, max(self._limit, self.size))
        logger.debug(f"Window grown to {self.size}")
        return self.size

    def reset(self) -> None:
        """Restore the initial window size."""
        if self.size != self.initial_size:
            logger.debug(f"Window reset from {self.size} to {self.initial_size}")
        self.size = self.initial_size

    def window(self, ordered: Sequence[T]) -> Tuple[T, ...]:
        """Visible prefix of ordered. Same result object while nothing changed."""
        self.bind(ordered)
        key = (id(ordered), self.size)
        if self._cached_for != key:
            self._cached_window = window(ordered, self.size)
            self._cached_for = key
        return self._cached_window

    def remaining(self, ordered: Sequence[T]) -> int:
        """Records of ordered beyond the visible window (never negative)."""
        return max(0, len(ordered) - len(self.window(ordered)))
