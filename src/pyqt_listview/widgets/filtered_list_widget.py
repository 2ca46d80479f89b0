"""
Searchable, filterable list widget driven by a ViewHandle.

Builds its controls from the view's configuration: a search box, one
combo box per equality/custom filter, one check box per flag filter, a
sort selector, the visible records, and a "Load More" button reporting
how many records are still hidden.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLineEdit, QComboBox, QCheckBox,
    QListWidget, QListWidgetItem, QPushButton, QLabel
)
from PyQt6.QtCore import Qt, pyqtSignal

from pyqt_listview.core.sort_utils import natural_sort
from pyqt_listview.presets import distinct_values
from pyqt_listview.services.view_config import FilterDef, FilterKind
from pyqt_listview.services.view_coordinator import ViewHandle, ViewSnapshot

logger = logging.getLogger(__name__)

RecordFormatter = Callable[[Any], str]


class FilteredListWidget(QWidget):
    """
    List widget presenting the visible window of a ViewHandle.

    Typing goes through the handle's debounce; selectors apply at once.
    The list is repopulated only when the visible window object changes.

    Usage:
        view = create_view(items, demo_item_config(items))
        widget = FilteredListWidget(view, formatter=lambda item: item.name)
        widget.error_occurred.connect(on_error)
    """

    view_changed = pyqtSignal(object)       # ViewSnapshot
    error_occurred = pyqtSignal(Exception)  # Full exception, caller decides

    def __init__(self, view: ViewHandle, formatter: Optional[RecordFormatter] = None,
                 search_placeholder: str = "Search...", parent=None):
        super().__init__(parent)
        self.view = view
        self.formatter = formatter or str
        self._search_placeholder = search_placeholder
        self.filter_widgets: Dict[str, QWidget] = {}
        self._rendered_visible = None

        self._setup_ui()
        self._setup_connections()
        self.view.add_listener(self._on_view_changed)
        self._render(self.view.current())

    # ========== UI SETUP ==========

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(5, 5, 5, 5)
        layout.setSpacing(5)

        controls = QHBoxLayout()
        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText(self._search_placeholder)
        controls.addWidget(self.search_input, 1)

        self.clear_button = QPushButton("Clear")
        controls.addWidget(self.clear_button)

        for filter_def in self.view.config.discrete_filters:
            widget = self._create_filter_widget(filter_def)
            self.filter_widgets[filter_def.name] = widget
            controls.addWidget(widget)

        self.sort_combo = QComboBox()
        for sort_key in self.view.config.sort_keys:
            self.sort_combo.addItem(sort_key.display_name, sort_key.name)
        self.sort_combo.setCurrentIndex(self.sort_combo.findData(self.view.config.default_sort_key))
        controls.addWidget(self.sort_combo)
        layout.addLayout(controls)

        self.status_label = QLabel()
        layout.addWidget(self.status_label)

        self.list_widget = QListWidget()
        layout.addWidget(self.list_widget, 1)

        self.load_more_button = QPushButton()
        layout.addWidget(self.load_more_button)

    def _create_filter_widget(self, filter_def: FilterDef) -> QWidget:
        if filter_def.kind is FilterKind.FLAG:
            checkbox = QCheckBox(filter_def.display_name)
            checkbox.setChecked(bool(filter_def.default))
            checkbox.toggled.connect(
                lambda checked, name=filter_def.name: self.select_filter(name, checked)
            )
            return checkbox

        combo = QComboBox()
        combo.setToolTip(filter_def.display_name)
        for choice in self._filter_choices(filter_def):
            combo.addItem(str(choice), choice)
        combo.setCurrentIndex(0)
        combo.currentIndexChanged.connect(
            lambda index, name=filter_def.name, box=combo: self.select_filter(name, box.itemData(index))
        )
        return combo

    def _filter_choices(self, filter_def: FilterDef) -> List[Any]:
        """Declared choices, or the default followed by naturally sorted distinct values."""
        if filter_def.choices is not None:
            choices = list(filter_def.choices)
        elif filter_def.field is not None:
            choices = natural_sort(distinct_values(self.view.collection, filter_def.field))
        else:
            choices = []
        if filter_def.default in choices:
            choices.remove(filter_def.default)
        return [filter_def.default, *choices]

    def _setup_connections(self):
        self.search_input.textChanged.connect(self.view.set_search_term)
        self.search_input.returnPressed.connect(self.view.flush)
        self.clear_button.clicked.connect(self.clear_search)
        self.sort_combo.currentIndexChanged.connect(
            lambda index: self.select_sort_key(self.sort_combo.itemData(index))
        )
        self.load_more_button.clicked.connect(self.view.load_more)

    # ========== ACTIONS ==========

    def select_filter(self, name: str, value: Any) -> None:
        error = self.view.set_filter(name, value)
        if error is not None:
            self.error_occurred.emit(error)

    def select_sort_key(self, name: str) -> None:
        error = self.view.set_sort_key(name)
        if error is not None:
            self.error_occurred.emit(error)

    def clear_search(self) -> None:
        """Empty the search box and commit immediately."""
        self.search_input.blockSignals(True)
        try:
            self.search_input.clear()
        finally:
            self.search_input.blockSignals(False)
        self.view.reset()

    # ========== RENDERING ==========

    def _on_view_changed(self, snapshot: ViewSnapshot):
        try:
            self._render(snapshot)
        except Exception as e:
            logger.exception(f"Failed to render view snapshot: {e}")
            self.error_occurred.emit(e)
        self.view_changed.emit(snapshot)

    def _render(self, snapshot: ViewSnapshot):
        if snapshot.visible is not self._rendered_visible:
            self.list_widget.clear()
            for record in snapshot.visible:
                item = QListWidgetItem(self.formatter(record))
                item.setData(Qt.ItemDataRole.UserRole, record)
                self.list_widget.addItem(item)
            self._rendered_visible = snapshot.visible

        self.status_label.setText(f"Showing {snapshot.total_matched} of {snapshot.total_items} items")
        self.load_more_button.setText(f"Load More ({snapshot.remaining} remaining)")
        self.load_more_button.setVisible(snapshot.has_more)

    def refresh(self):
        """Re-render from the view's current snapshot."""
        self._render(self.view.current())

    def closeEvent(self, event):
        self.view.remove_listener(self._on_view_changed)
        self.view.close()
        super().closeEvent(event)
