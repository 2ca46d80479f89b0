"""Sorting utilities and comparator factories for sort keys."""

import locale
import re
from datetime import date, datetime
from functools import cmp_to_key
from typing import Any, Callable, Iterable, List, TypeVar

from pyqt_listview.core.field_utils import FieldRef, resolve_field

T = TypeVar("T")

# (a, b) -> -1, 0 or 1
Comparator = Callable[[Any, Any], int]

_NUMERIC_SPLIT = re.compile(r"(\d+)")


def _collation_key(text: str) -> str:
    # strxfrm rejects embedded NUL characters
    return locale.strxfrm(text.replace("\x00", ""))


def natural_sort_key(value: Any) -> List[Any]:
    """Key ordering embedded numbers numerically ("Item 2" before "Item 10")."""
    parts = _NUMERIC_SPLIT.split("" if value is None else str(value))
    # split() puts the captured digit runs at odd indices
    return [int(p) if i % 2 else _collation_key(p.casefold()) for i, p in enumerate(parts)]


def natural_sort(items: Iterable[T]) -> List[T]:
    """Return a naturally sorted list for human-friendly ordering."""
    return sorted(list(items), key=natural_sort_key)


def text_sort_key(value: Any):
    """Locale-aware, case-insensitive key; original text breaks case-only ties."""
    text = "" if value is None else str(value)
    return (_collation_key(text.casefold()), _collation_key(text), text)


def _sign(a, b) -> int:
    return (a > b) - (a < b)


def _is_missing(value: Any) -> bool:
    # NaN is unordered, so it sorts with None
    return value is None or value != value


def text_comparator(field: FieldRef, natural: bool = False) -> Comparator:
    """Ascending text comparison on field."""
    key = natural_sort_key if natural else text_sort_key

    def compare(a, b) -> int:
        return _sign(key(resolve_field(a, field)), key(resolve_field(b, field)))

    return compare


def number_comparator(field: FieldRef, descending: bool = False) -> Comparator:
    """Numeric comparison on field. Missing values (None or NaN) sort last either way."""

    def compare(a, b) -> int:
        va, vb = resolve_field(a, field), resolve_field(b, field)
        missing_a, missing_b = _is_missing(va), _is_missing(vb)
        if missing_a or missing_b:
            return missing_a - missing_b
        result = _sign(va, vb)
        return -result if descending else result

    return compare


def to_timestamp(value: Any) -> float:
    """Convert datetime, date, ISO-8601 string or epoch number to epoch seconds."""
    if value is None:
        return float("-inf")
    if isinstance(value, datetime):
        return value.timestamp()
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day).timestamp()
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return datetime.fromisoformat(text).timestamp()
    return float(value)


def timestamp_comparator(field: FieldRef, newest_first: bool = True) -> Comparator:
    """Chronological comparison on field, reverse-chronological by default."""

    def compare(a, b) -> int:
        result = _sign(to_timestamp(resolve_field(a, field)), to_timestamp(resolve_field(b, field)))
        return -result if newest_first else result

    return compare


def stable_sorted(items: Iterable[T], comparator: Comparator) -> List[T]:
    """
    Sort with comparator, breaking ties on input position.

    The position tie-break makes stability part of the ordering itself
    instead of relying on the sort routine.
    """

    def compare(left, right) -> int:
        result = comparator(left[1], right[1])
        if result:
            return result
        return left[0] - right[0]

    decorated = sorted(enumerate(items), key=cmp_to_key(compare))
    return [item for _, item in decorated]
