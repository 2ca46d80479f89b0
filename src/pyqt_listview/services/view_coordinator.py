"""
View coordinator: owns the view parameters of one list view.

Wires a debounced search term, discrete filter selections and a sort key
into the memoized filter -> sort pipeline, and a window controller on top
of it. Every change to what matches (committed search term, filter, sort
key) resets the window before the next read.

State machine:
    IDLE    --set_search_term--> PENDING   (debounce timer restarted)
    PENDING --set_search_term--> PENDING   (timer restarted)
    PENDING --timer fires------> IDLE      (term committed, window reset)
    IDLE    --set_filter/set_sort_key/load_more/reset--> IDLE
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, Tuple, TypeVar

from pyqt_listview.core.debounce_timer import DebouncedValue
from pyqt_listview.exceptions import UnknownFilterName, UnknownSortKey
from pyqt_listview.protocols.scheduler import Scheduler
from pyqt_listview.services.memo_pipeline import MemoizedPipeline
from pyqt_listview.services.ordering_service import OrderingService
from pyqt_listview.services.search_service import SearchService
from pyqt_listview.services.view_config import ViewConfig
from pyqt_listview.services.window_controller import WindowController

logger = logging.getLogger(__name__)

T = TypeVar('T')


class ViewState(Enum):
    IDLE = "idle"
    PENDING = "pending"


@dataclass(frozen=True)
class ViewParameters:
    """User-adjustable view state at one point in time."""
    search_term: str
    debounced_search_term: str
    filter_selections: Dict[str, Any]
    sort_key: str
    window_size: int


@dataclass(frozen=True)
class ViewSnapshot(Generic[T]):
    """Read-only result of ViewHandle.current()."""
    visible: Tuple[T, ...]
    total_matched: int
    remaining: int
    total_items: int
    search_term: str = ""
    debounced_search_term: str = ""
    sort_key: str = ""
    filters: Dict[str, Any] = field(default_factory=dict)
    pending: bool = False

    @property
    def has_more(self) -> bool:
        return self.remaining > 0


@dataclass(frozen=True)
class PipelineStats:
    filter_runs: int
    sort_runs: int


SnapshotListener = Callable[[ViewSnapshot], None]


class ViewHandle(Generic[T]):
    """
    Handle to one live list view.

    Mutators never raise on bad names: set_filter() and set_sort_key()
    leave state untouched and return the UnknownFilterName/UnknownSortKey
    instance instead, or None when the call was accepted.

    Usage:
        view = create_view(items, config)
        view.set_search_term("lamp")
        view.set_filter("category", "Category 3")
        snapshot = view.current()
        if snapshot.has_more:
            view.load_more()
    """

    def __init__(self, collection: Sequence[T], config: ViewConfig,
                 scheduler: Optional[Scheduler] = None):
        self.config = config.resolved()
        self._collection: Tuple[T, ...] = tuple(collection)
        self._selections: Dict[str, Any] = self.config.default_selections()
        self._sort_key: str = self.config.default_sort_key
        self._listeners: List[SnapshotListener] = []
        self._closed = False
        self._committing_in_call = False

        self._search = DebouncedValue(self.config.debounce_ms, self._on_search_committed, scheduler)
        self._window: WindowController[T] = WindowController(
            self.config.initial_window_size, self.config.growth_step
        )
        self._pipeline: MemoizedPipeline[T] = MemoizedPipeline(
            self._collection,
            SearchService(self.config.search_fields, self.config.discrete_filters, self.config.empty_search_policy),
            OrderingService(self.config.sort_keys),
        )
        logger.debug(f"Created view over {len(self._collection)} record(s): {self.config.describe()}")

    # ========== PROPERTIES ==========

    @property
    def collection(self) -> Tuple[T, ...]:
        return self._collection

    @property
    def state(self) -> ViewState:
        return ViewState.PENDING if self._search.pending else ViewState.IDLE

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def parameters(self) -> ViewParameters:
        return ViewParameters(
            search_term=self._search.raw,
            debounced_search_term=self._search.committed,
            filter_selections=dict(self._selections),
            sort_key=self._sort_key,
            window_size=self._window.size,
        )

    @property
    def stats(self) -> PipelineStats:
        return PipelineStats(self._pipeline.filter_runs, self._pipeline.sort_runs)

    # ========== USER ACTIONS ==========

    def set_search_term(self, raw: str) -> None:
        """Record raw search input; it is committed after the debounce delay."""
        if self._closed:
            return
        self._search.set(raw)

    def flush(self) -> None:
        """Commit a pending search term now instead of waiting for the timer."""
        self._committing_in_call = True
        try:
            self._search.flush()
        finally:
            self._committing_in_call = False

    def set_filter(self, name: str, value: Any) -> Optional[UnknownFilterName]:
        """Select a discrete filter value. Applies immediately, without debounce."""
        if self.config.get_filter(name) is None:
            error = UnknownFilterName(name)
            logger.warning(f"Ignoring set_filter: {error}")
            return error
        if self._closed or self._selections[name] == value:
            return None
        self._selections[name] = value
        self._window.reset()
        logger.debug(f"Filter {name!r} set to {value!r}")
        self._notify()
        return None

    def set_sort_key(self, name: str) -> Optional[UnknownSortKey]:
        """Select the sort key. Applies immediately, without debounce."""
        if self.config.get_sort_key(name) is None:
            error = UnknownSortKey(name)
            logger.warning(f"Ignoring set_sort_key: {error}")
            return error
        if self._closed or self._sort_key == name:
            return None
        self._sort_key = name
        self._window.reset()
        logger.debug(f"Sort key set to {name!r}")
        self._notify()
        return None

    def load_more(self) -> int:
        """Grow the visible window by one step. Returns the new window size."""
        if self._closed:
            return self._window.size
        self._window.bind(self._ordered())
        size = self._window.grow()
        self._notify()
        return size

    def reset(self) -> None:
        """Clear the search term immediately, bypassing the debounce delay."""
        if self._closed:
            return
        committed_before = self._search.committed
        self._committing_in_call = True
        try:
            self._search.commit_now("")
        finally:
            self._committing_in_call = False
        if committed_before == "":
            # No commit happened, so _on_search_committed did not reset.
            self._window.reset()
            self._notify()

    def close(self) -> None:
        """Tear down: cancel any pending debounce and drop listeners."""
        self._search.close()
        self._listeners.clear()
        self._closed = True

    # ========== READS ==========

    def current(self) -> ViewSnapshot[T]:
        """Snapshot of the latest committed state."""
        ordered = self._ordered()
        visible = self._window.window(ordered)
        return ViewSnapshot(
            visible=visible,
            total_matched=len(ordered),
            remaining=max(0, len(ordered) - len(visible)),
            total_items=len(self._collection),
            search_term=self._search.raw,
            debounced_search_term=self._search.committed,
            sort_key=self._sort_key,
            filters=dict(self._selections),
            pending=self._search.pending,
        )

    def filtered(self) -> Tuple[T, ...]:
        """Filter-stage result for the committed parameters (pre-sort order)."""
        return self._pipeline.filtered(self._search.committed, self._selections)

    def ordered(self) -> Tuple[T, ...]:
        """Sort-stage result for the committed parameters."""
        return self._ordered()

    # ========== LISTENERS ==========

    def add_listener(self, listener: SnapshotListener) -> None:
        """Call listener with a fresh snapshot after every committed change."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: SnapshotListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ========== INTERNALS ==========

    def _ordered(self) -> Tuple[T, ...]:
        return self._pipeline.ordered(self._search.committed, self._selections, self._sort_key)

    def _on_search_committed(self, term: str) -> None:
        logger.debug(f"Search term committed: {term!r}")
        self._window.reset()
        self._notify(propagate=self._committing_in_call)

    def _notify(self, propagate: bool = True) -> None:
        """
        Send a fresh snapshot to every listener.

        With propagate=False (a commit fired by the scheduler, where there
        is no caller) failures are logged and the remaining listeners still
        run.
        """
        if not self._listeners:
            return
        if propagate:
            snapshot = self.current()
            for listener in list(self._listeners):
                listener(snapshot)
            return

        try:
            snapshot = self.current()
        except Exception:
            logger.exception("Failed to build snapshot after search commit")
            return
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception(f"View listener {listener!r} failed after search commit")


def create_view(collection: Sequence[T], config: ViewConfig,
                scheduler: Optional[Scheduler] = None) -> ViewHandle[T]:
    """
    Build a view over an already loaded collection.

    A new collection for the same logical view needs a new create_view()
    call; the handle never swaps its collection.

    Args:
        collection: Records in their natural display order
        config: View configuration, validated here
        scheduler: Debounce scheduler (registered default or Qt when None)

    Raises:
        InvalidConfiguration: If config cannot build a view
    """
    return ViewHandle(collection, config, scheduler)
