"""
Declarative configuration for list views.

A ViewConfig names the text fields searched, the discrete filters offered,
and the sort keys available. resolved() validates it and fills unset values
from the global ListViewConfig, failing loud on anything unusable.
"""

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from pyqt_listview.core.field_utils import FieldRef, field_label, resolve_field
from pyqt_listview.core.sort_utils import Comparator
from pyqt_listview.exceptions import InvalidConfiguration
from pyqt_listview.protocols import get_listview_config


class _Missing:
    def __repr__(self):
        return "MISSING"


MISSING: Any = _Missing()


class EmptySearchPolicy(Enum):
    """What a view shows when the search term is empty and no filter is active."""
    SHOW_ALL = "show-all"
    SHOW_NONE = "show-none"


class FilterKind(Enum):
    EQUALS = "equals"   # field value == selection
    FLAG = "flag"       # selection True requires a truthy field
    CUSTOM = "custom"   # match(record, selection)


@dataclass(frozen=True)
class FilterDef:
    """Discrete filter declaration.

    Attributes:
        name: Key used with ViewHandle.set_filter()
        default: Selection meaning "no constraint"; required
        field: Record field the filter reads (EQUALS and FLAG kinds)
        kind: How a selection is matched against a record
        match: Predicate taking (record, selection) for CUSTOM filters
        choices: Selectable values for presentation, default first
        label: Display name
    """
    name: str
    default: Any = MISSING
    field: Optional[FieldRef] = None
    kind: FilterKind = FilterKind.EQUALS
    match: Optional[Callable[[Any, Any], bool]] = None
    choices: Optional[Tuple[Any, ...]] = None
    label: Optional[str] = None

    @classmethod
    def equals(cls, name: str, field: FieldRef, default: Any = "all",
               choices: Optional[Sequence[Any]] = None, label: Optional[str] = None) -> 'FilterDef':
        return cls(name=name, default=default, field=field, kind=FilterKind.EQUALS,
                   choices=tuple(choices) if choices is not None else None, label=label)

    @classmethod
    def flag(cls, name: str, field: FieldRef, label: Optional[str] = None) -> 'FilterDef':
        return cls(name=name, default=False, field=field, kind=FilterKind.FLAG, label=label)

    @classmethod
    def custom(cls, name: str, match: Callable[[Any, Any], bool], default: Any,
               choices: Optional[Sequence[Any]] = None, label: Optional[str] = None) -> 'FilterDef':
        return cls(name=name, default=default, kind=FilterKind.CUSTOM, match=match,
                   choices=tuple(choices) if choices is not None else None, label=label)

    @property
    def display_name(self) -> str:
        return self.label or self.name

    def is_active(self, selection: Any) -> bool:
        return selection != self.default

    def matches(self, record: Any, selection: Any) -> bool:
        if self.kind is FilterKind.CUSTOM:
            return bool(self.match(record, selection))
        value = resolve_field(record, self.field)
        if self.kind is FilterKind.FLAG:
            return bool(value) if selection else True
        return value == selection


@dataclass(frozen=True)
class SortKeyDef:
    """Sort key declaration: a name and a comparator returning -1, 0 or 1."""
    name: str
    comparator: Optional[Comparator] = None
    label: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.label or self.name


@dataclass
class ViewConfig:
    """Configuration for one list view.

    Fields left as None take their value from the global ListViewConfig
    (initial_window_size, debounce_ms), the first sort key
    (default_sort_key), or the initial window size (growth_step).
    """
    search_fields: Sequence[FieldRef] = ()
    discrete_filters: Sequence[FilterDef] = ()
    sort_keys: Sequence[SortKeyDef] = ()
    initial_window_size: Optional[int] = None
    debounce_ms: Optional[int] = None
    empty_search_policy: Any = EmptySearchPolicy.SHOW_ALL
    default_sort_key: Optional[str] = None
    growth_step: Optional[int] = None
    _filters_by_name: Dict[str, FilterDef] = field(default_factory=dict, init=False, repr=False, compare=False)
    _sort_keys_by_name: Dict[str, SortKeyDef] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self):
        self._filters_by_name = {f.name: f for f in self.discrete_filters}
        self._sort_keys_by_name = {k.name: k for k in self.sort_keys}

    def resolved(self) -> 'ViewConfig':
        """Validate and return a copy with every optional value filled in.

        Raises:
            InvalidConfiguration: If the configuration cannot build a view
        """
        defaults = get_listview_config()

        if not self.search_fields:
            raise InvalidConfiguration("At least one search field is required")

        filter_names = [f.name for f in self.discrete_filters]
        _reject_duplicates("filter", filter_names)
        for filter_def in self.discrete_filters:
            if filter_def.default is MISSING:
                raise InvalidConfiguration(f"Filter {filter_def.name!r} has no default value")
            if filter_def.kind is FilterKind.CUSTOM and filter_def.match is None:
                raise InvalidConfiguration(f"Custom filter {filter_def.name!r} has no match predicate")
            if filter_def.kind is not FilterKind.CUSTOM and filter_def.field is None:
                raise InvalidConfiguration(f"Filter {filter_def.name!r} has no field")

        if not self.sort_keys:
            raise InvalidConfiguration("At least one sort key is required")
        _reject_duplicates("sort key", [k.name for k in self.sort_keys])
        for sort_key in self.sort_keys:
            if sort_key.comparator is None:
                raise InvalidConfiguration(f"Sort key {sort_key.name!r} has no comparator")

        default_sort_key = self.default_sort_key or self.sort_keys[0].name
        if default_sort_key not in self._sort_keys_by_name:
            raise InvalidConfiguration(f"Default sort key {default_sort_key!r} is not declared")

        try:
            policy = EmptySearchPolicy(self.empty_search_policy)
        except ValueError:
            raise InvalidConfiguration(
                f"Unknown empty search policy: {self.empty_search_policy!r}"
            ) from None

        window = self.initial_window_size if self.initial_window_size is not None else defaults.default_window_size
        if window < 1:
            raise InvalidConfiguration(f"initial_window_size must be >= 1, got {window}")
        step = self.growth_step if self.growth_step is not None else window
        if step < 1:
            raise InvalidConfiguration(f"growth_step must be >= 1, got {step}")
        debounce = self.debounce_ms if self.debounce_ms is not None else defaults.default_debounce_ms
        if debounce < 0:
            raise InvalidConfiguration(f"debounce_ms must be >= 0, got {debounce}")

        return dataclasses.replace(
            self,
            search_fields=tuple(self.search_fields),
            discrete_filters=tuple(self.discrete_filters),
            sort_keys=tuple(self.sort_keys),
            initial_window_size=window,
            debounce_ms=debounce,
            empty_search_policy=policy,
            default_sort_key=default_sort_key,
            growth_step=step,
        )

    def get_filter(self, name: str) -> Optional[FilterDef]:
        return self._filters_by_name.get(name)

    def get_sort_key(self, name: str) -> Optional[SortKeyDef]:
        return self._sort_keys_by_name.get(name)

    def default_selections(self) -> Dict[str, Any]:
        return {f.name: f.default for f in self.discrete_filters}

    def describe(self) -> str:
        fields = ", ".join(field_label(f) for f in self.search_fields)
        return (f"search=[{fields}] filters={[f.name for f in self.discrete_filters]} "
                f"sort_keys={[k.name for k in self.sort_keys]}")


def _reject_duplicates(kind: str, names: Sequence[str]) -> None:
    seen = set()
    for name in names:
        if name in seen:
            raise InvalidConfiguration(f"Duplicate {kind} name: {name!r}")
        seen.add(name)
