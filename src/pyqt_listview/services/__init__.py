"""
Service layer for list views.

Predicate and ordering engines, the memoized filter -> sort pipeline,
windowing, and the view coordinator that ties them together.
"""

from .view_config import ViewConfig, FilterDef, FilterKind, SortKeyDef, EmptySearchPolicy
from .search_service import SearchService
from .ordering_service import OrderingService
from .memo_pipeline import MemoSlot, MemoizedPipeline, IdentityRef
from .window_controller import WindowController, window
from .view_coordinator import (
    ViewHandle,
    ViewParameters,
    ViewSnapshot,
    ViewState,
    PipelineStats,
    create_view,
)

__all__ = [
    "ViewConfig",
    "FilterDef",
    "FilterKind",
    "SortKeyDef",
    "EmptySearchPolicy",
    "SearchService",
    "OrderingService",
    "MemoSlot",
    "MemoizedPipeline",
    "IdentityRef",
    "WindowController",
    "window",
    "ViewHandle",
    "ViewParameters",
    "ViewSnapshot",
    "ViewState",
    "PipelineStats",
    "create_view",
]
