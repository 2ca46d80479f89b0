"""
Shared search service for list views.

Framework-agnostic predicate evaluation: case-insensitive substring search
across several text fields, combined with discrete filter selections.
"""

from typing import Any, Generic, Mapping, Sequence, Tuple, TypeVar
import logging

from pyqt_listview.core.field_utils import FieldRef, resolve_field
from pyqt_listview.services.view_config import EmptySearchPolicy, FilterDef

logger = logging.getLogger(__name__)

T = TypeVar('T')


class SearchService(Generic[T]):
    """
    Predicate engine for one view configuration.

    A record matches when the search term is a substring of any search
    field (OR across fields) and every active discrete filter matches
    (AND across filters). A filter is active when its selection differs
    from its default.

    When the term is empty and no filter is active the result depends on
    the empty search policy: the full collection for SHOW_ALL, nothing for
    SHOW_NONE.
    """

    def __init__(self,
                 search_fields: Sequence[FieldRef],
                 filters: Sequence[FilterDef] = (),
                 empty_search_policy: EmptySearchPolicy = EmptySearchPolicy.SHOW_ALL):
        """
        Initialize search service.

        Args:
            search_fields: Fields whose text is searched
            filters: Discrete filter declarations
            empty_search_policy: Result when nothing narrows the collection
        """
        self.search_fields = tuple(search_fields)
        self.filters = tuple(filters)
        self.empty_search_policy = empty_search_policy

    def active_filters(self, selections: Mapping[str, Any]) -> Tuple[Tuple[FilterDef, Any], ...]:
        """Return (filter, selection) pairs whose selection is not the default."""
        active = []
        for filter_def in self.filters:
            selection = selections.get(filter_def.name, filter_def.default)
            if filter_def.is_active(selection):
                active.append((filter_def, selection))
        return tuple(active)

    def matches_term(self, record: T, term_lower: str) -> bool:
        """True if term_lower occurs in any search field of record."""
        for search_field in self.search_fields:
            value = resolve_field(record, search_field)
            if value is not None and term_lower in str(value).lower():
                return True
        return False

    def filter(self, collection: Sequence[T], search_term: str,
               selections: Mapping[str, Any]) -> Tuple[T, ...]:
        """
        Filter collection by search term and filter selections.

        Args:
            collection: Records in display order
            search_term: Committed (debounced) search text
            selections: Filter name -> selected value

        Returns:
            Matching records, in collection order
        """
        active = self.active_filters(selections)

        if not search_term and not active:
            if self.empty_search_policy is EmptySearchPolicy.SHOW_NONE:
                return ()
            return tuple(collection)

        term_lower = search_term.lower()
        matched = tuple(
            record for record in collection
            if (not term_lower or self.matches_term(record, term_lower))
            and all(filter_def.matches(record, selection) for filter_def, selection in active)
        )
        logger.debug(f"Search {search_term!r} with {len(active)} active filter(s): "
                     f"{len(matched)}/{len(collection)} matched")
        return matched
