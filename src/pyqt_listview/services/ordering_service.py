"""Ordering engine: stable, non-mutating sort by a declared sort key."""

import logging
from typing import Generic, Sequence, Tuple, TypeVar

from pyqt_listview.core.sort_utils import stable_sorted
from pyqt_listview.exceptions import UnknownSortKey
from pyqt_listview.services.view_config import SortKeyDef

logger = logging.getLogger(__name__)

T = TypeVar('T')


class OrderingService(Generic[T]):
    """
    Sorts sequences by named sort keys.

    The input is never reordered in place, so one filtered result can be
    shared between readers. Records that compare equal keep their input
    order.
    """

    def __init__(self, sort_keys: Sequence[SortKeyDef]):
        self._sort_keys = {key.name: key for key in sort_keys}

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(self._sort_keys)

    def sort(self, sequence: Sequence[T], sort_key: str) -> Tuple[T, ...]:
        """Return a new, stably ordered tuple.

        Raises:
            UnknownSortKey: If sort_key was not declared
        """
        key_def = self._sort_keys.get(sort_key)
        if key_def is None:
            raise UnknownSortKey(sort_key)
        ordered = tuple(stable_sorted(sequence, key_def.comparator))
        logger.debug(f"Sorted {len(ordered)} record(s) by {sort_key!r}")
        return ordered
