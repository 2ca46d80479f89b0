"""
Presentation widgets.

PyQt6 widgets that render a ViewHandle; all list state lives in the handle.
"""

from .filtered_list_widget import FilteredListWidget

__all__ = [
    "FilteredListWidget",
]
