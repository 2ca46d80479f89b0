"""Field access helpers for opaque records."""

from collections.abc import Mapping
from typing import Any, Callable, Union

# Either a dotted attribute/key path ("author.username") or a callable.
FieldRef = Union[str, Callable[[Any], Any]]


def resolve_field(record: Any, field: FieldRef) -> Any:
    """
    Read a field from a record.

    Dotted paths walk attributes or mapping keys one segment at a time.
    A missing segment or a None along the way yields None.
    """
    if callable(field):
        return field(record)

    value = record
    for part in field.split("."):
        if value is None:
            return None
        if isinstance(value, Mapping):
            value = value.get(part)
        else:
            value = getattr(value, part, None)
    return value


def field_label(field: FieldRef) -> str:
    """Human readable name for a field reference."""
    if callable(field):
        return getattr(field, "__name__", repr(field))
    return field
