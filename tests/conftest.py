"""pytest configuration and fixtures for pyqt-listview tests."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtWidgets import QApplication


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests."""
    app = QApplication.instance() or QApplication([])
    yield app
    # Don't quit - may cause issues with other tests


@pytest.fixture
def clock():
    """Virtual clock scheduler for deterministic debounce timing."""
    from pyqt_listview.core import VirtualClockScheduler
    return VirtualClockScheduler()


@pytest.fixture(autouse=True)
def default_listview_config():
    """Restore global configuration after each test."""
    from pyqt_listview.protocols import set_listview_config, register_default_scheduler
    yield
    set_listview_config(None)
    register_default_scheduler(None)


@pytest.fixture
def catalog():
    """120 records: 80 whose name contains "a", 40 that do not."""
    records = []
    for i in range(120):
        name = f"Sample {i:03d}" if i < 80 else f"Item {i:03d}"
        records.append({
            "id": i,
            "name": name,
            "price": (i * 37) % 101,
            "category": f"Category {i % 3}",
            "in_stock": i % 2 == 0,
        })
    return tuple(records)


@pytest.fixture
def catalog_config():
    """show-none config over the catalog fixture, window of 50."""
    from pyqt_listview.core.sort_utils import number_comparator, text_comparator
    from pyqt_listview.services import EmptySearchPolicy, FilterDef, SortKeyDef, ViewConfig

    return ViewConfig(
        search_fields=("name",),
        discrete_filters=(
            FilterDef.equals("category", "category", default="all"),
            FilterDef.flag("in_stock", "in_stock"),
        ),
        sort_keys=(
            SortKeyDef("name", text_comparator("name")),
            SortKeyDef("price", number_comparator("price")),
        ),
        initial_window_size=50,
        debounce_ms=500,
        empty_search_policy=EmptySearchPolicy.SHOW_NONE,
    )
