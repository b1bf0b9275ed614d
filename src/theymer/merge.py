"""Layered override merging.

``merge(value, base)`` combines two records of the same dataclass type, with
*value* (the more specific layer) winning over *base* (the default layer).
Each field declares its container shape through :func:`merged`; the shape
selects one combination rule:

``optional``
    *value* if it is not ``None``, else *base*.
``keyed``
    Mapping union; on a key collision *value*'s item replaces *base*'s item
    wholesale but keeps *base*'s position.
``append``
    *base* followed by *value*. Later entries shadow earlier ones at lookup
    time; exact duplicate entries collapse onto their last occurrence.
``nonempty``
    *value* if it is non-empty, else *base*.
``record``
    Nested dataclass merged field-wise (``optional`` when either side is absent).
``keep``
    Always *value* (identity keys such as a provider's host).
"""

from __future__ import annotations

import dataclasses
from typing import Any, Callable, Dict, List, Mapping, Sequence, TypeVar

T = TypeVar("T")

OPTIONAL = "optional"
KEYED = "keyed"
APPEND = "append"
NONEMPTY = "nonempty"
RECORD = "record"
KEEP = "keep"


def merged(shape: str = OPTIONAL, **kwargs: Any) -> Any:
    """``dataclasses.field()`` tagged with the merge *shape* of the field."""
    if shape not in _RULES:
        raise ValueError(f"unknown merge shape: {shape}")
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata["merge"] = shape
    return dataclasses.field(metadata=metadata, **kwargs)


def merge_optional(value: Any, base: Any) -> Any:
    return base if value is None else value


def merge_keyed(value: Mapping[Any, Any], base: Mapping[Any, Any]) -> Dict[Any, Any]:
    result = dict(base)
    for key, item in value.items():
        result[key] = item
    return result


def merge_append(value: Sequence[Any], base: Sequence[Any]) -> List[Any]:
    combined = [*base, *value]
    last_seen = {item: idx for idx, item in enumerate(combined)}
    return [item for idx, item in enumerate(combined) if last_seen[item] == idx]


def merge_nonempty(value: Any, base: Any) -> Any:
    return value if value else base


def merge_record(value: Any, base: Any) -> Any:
    if value is None or base is None:
        return merge_optional(value, base)
    return merge(value, base)


def merge_keep(value: Any, base: Any) -> Any:
    return value


_RULES: Dict[str, Callable[[Any, Any], Any]] = {
    OPTIONAL: merge_optional,
    KEYED: merge_keyed,
    APPEND: merge_append,
    NONEMPTY: merge_nonempty,
    RECORD: merge_record,
    KEEP: merge_keep,
}


def merge(value: T, base: T) -> T:
    """Merge dataclass *value* over *base* field by field."""
    if not dataclasses.is_dataclass(value) or isinstance(value, type):
        raise TypeError(f"cannot merge {type(value).__name__}: not a dataclass instance")
    if type(value) is not type(base):
        raise TypeError(
            f"cannot merge {type(value).__name__} over {type(base).__name__}"
        )

    combined: Dict[str, Any] = {}
    for f in dataclasses.fields(value):
        if not f.init:
            continue
        rule = _RULES[f.metadata.get("merge", OPTIONAL)]
        combined[f.name] = rule(getattr(value, f.name), getattr(base, f.name))
    return type(value)(**combined)


__all__ = [
    "APPEND",
    "KEEP",
    "KEYED",
    "NONEMPTY",
    "OPTIONAL",
    "RECORD",
    "merge",
    "merge_append",
    "merge_keyed",
    "merge_nonempty",
    "merge_optional",
    "merge_record",
    "merged",
]
