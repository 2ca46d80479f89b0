"""
Dependency-keyed memoization for the filter and sort stages.

Each stage owns one cache slot tagged with the dependency tuple that
produced its result. A read recomputes the stage only when the current
tuple differs by value from the tag; otherwise the cached object itself
is returned, so consumers can detect "no change" with an identity check.
"""

import logging
from typing import Any, Callable, Generic, Mapping, Optional, Sequence, Tuple, TypeVar

from pyqt_listview.core.performance_monitor import get_monitor, timer
from pyqt_listview.protocols import get_listview_config
from pyqt_listview.services.ordering_service import OrderingService
from pyqt_listview.services.search_service import SearchService

logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')

FILTER_STAGE = "Filter stage"
SORT_STAGE = "Sort stage"


class IdentityRef:
    """Dependency wrapper that compares the wrapped object by identity."""

    __slots__ = ("obj",)

    def __init__(self, obj: Any):
        self.obj = obj

    def __eq__(self, other):
        return isinstance(other, IdentityRef) and other.obj is self.obj

    def __hash__(self):
        return id(self.obj)

    def __repr__(self):
        return f"IdentityRef({type(self.obj).__name__}@{id(self.obj):#x})"


def freeze_selections(selections: Mapping[str, Any]) -> Tuple[Tuple[str, Any], ...]:
    """Order-independent, value-comparable form of a selections mapping."""
    return tuple(sorted(selections.items(), key=lambda item: item[0]))


class MemoSlot(Generic[R]):
    """Single cache slot holding (dependency tuple, result)."""

    def __init__(self, name: str):
        self.name = name
        self.runs = 0
        self._deps: Optional[Tuple] = None
        self._result: Optional[R] = None
        self._filled = False

    def get(self, deps: Tuple, compute: Callable[[], R]) -> R:
        if self._filled and deps == self._deps:
            return self._result
        self._result = compute()
        self._deps = deps
        self._filled = True
        self.runs += 1
        logger.debug(f"{self.name} recomputed (run {self.runs})")
        return self._result

    def clear(self) -> None:
        self._deps = None
        self._result = None
        self._filled = False


class MemoizedPipeline(Generic[T]):
    """
    Two-stage filter -> sort computation over a fixed collection.

    Filter stage deps: (collection, search term, selections).
    Sort stage deps: (filter result, sort key).
    """

    def __init__(self, collection: Sequence[T], search: SearchService[T],
                 ordering: OrderingService[T]):
        self.collection = collection
        self.search = search
        self.ordering = ordering
        self._filter_slot: MemoSlot[Tuple[T, ...]] = MemoSlot(FILTER_STAGE)
        self._sort_slot: MemoSlot[Tuple[T, ...]] = MemoSlot(SORT_STAGE)

    @property
    def filter_runs(self) -> int:
        return self._filter_slot.runs

    @property
    def sort_runs(self) -> int:
        return self._sort_slot.runs

    def filtered(self, search_term: str, selections: Mapping[str, Any]) -> Tuple[T, ...]:
        deps = (IdentityRef(self.collection), search_term, freeze_selections(selections))
        return self._filter_slot.get(deps, lambda: self._run_filter(search_term, selections))

    def ordered(self, search_term: str, selections: Mapping[str, Any], sort_key: str) -> Tuple[T, ...]:
        matched = self.filtered(search_term, selections)
        deps = (IdentityRef(matched), sort_key)
        return self._sort_slot.get(deps, lambda: self._run_sort(matched, sort_key))

    def invalidate(self) -> None:
        """Drop both cached results."""
        self._filter_slot.clear()
        self._sort_slot.clear()

    def _run_filter(self, search_term, selections):
        threshold = get_listview_config().slow_stage_threshold_ms
        with get_monitor(FILTER_STAGE).measure(), \
                timer(FILTER_STAGE, threshold_ms=threshold, log_args=True,
                      records=len(self.collection), term=search_term):
            return self.search.filter(self.collection, search_term, selections)

    def _run_sort(self, matched, sort_key):
        threshold = get_listview_config().slow_stage_threshold_ms
        with get_monitor(SORT_STAGE).measure(), \
                timer(SORT_STAGE, threshold_ms=threshold, log_args=True,
                      records=len(matched), sort_key=sort_key):
            return self.ordering.sort(matched, sort_key)
