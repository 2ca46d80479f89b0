"""
pyqt-listview: incremental view computation for large PyQt6 list views.

Turns a large in-memory collection plus user-adjustable view parameters
into an up-to-date filtered, sorted and windowed projection while
recomputing as little as possible.

Architecture:
- Tier 1 (Core): Schedulers, debouncing, field access, sorting helpers
- Tier 2 (Protocols): Scheduler ABCs and global configuration
- Tier 3 (Services): Predicate/ordering engines, memoized pipeline,
  windowing, and the view coordinator
- Tier 4 (Widgets): FilteredListWidget rendering a view handle

Key Features:
- Debounced search with a schedule/cancel primitive (Qt or virtual clock)
- Dependency-keyed memoization with referentially stable results
- Stable, non-mutating sorts with declarative comparators
- "Load more" windowing that resets whenever the matches change
"""

__version__ = "0.1.0"

from pyqt_listview.exceptions import (
    ListViewError,
    InvalidConfiguration,
    UnknownSortKey,
    UnknownFilterName,
)
from pyqt_listview.services import (
    ViewConfig,
    FilterDef,
    SortKeyDef,
    EmptySearchPolicy,
    ViewHandle,
    ViewSnapshot,
    ViewState,
    create_view,
)

__all__ = [
    "__version__",
    "ListViewError",
    "InvalidConfiguration",
    "UnknownSortKey",
    "UnknownFilterName",
    "ViewConfig",
    "FilterDef",
    "SortKeyDef",
    "EmptySearchPolicy",
    "ViewHandle",
    "ViewSnapshot",
    "ViewState",
    "create_view",
]
