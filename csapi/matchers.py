"""
Predicate matchers for advanced filtering.

Four primitives cover every filter: id patterns, required-list containment,
single-value membership and keyword search. An empty or missing constraint
always matches; a missing record value never matches a non-empty constraint.
"""

from typing import Iterable, List, Optional, Sequence, TypeVar

T = TypeVar("T")


def match_id(resource_id: str, patterns: Optional[Sequence[str]]) -> bool:
    """
    True if the id matches any pattern.

    A pattern ending in '*' is a prefix test ("sys-*" matches "sys-002"),
    any other pattern is compared for equality.
    """
    if not patterns:
        return True
    for pattern in patterns:
        if pattern.endswith("*"):
            if resource_id.startswith(pattern[:-1]):
                return True
        elif resource_id == pattern:
            return True
    return False


def match_list(values: Optional[Iterable[str]], required: Optional[Sequence[str]]) -> bool:
    """True if every required value is present in values."""
    if not required:
        return True
    if values is None:
        return False
    present = set(values)
    return all(r in present for r in required)


def match_single(value: Optional[str], required: Optional[Sequence[str]]) -> bool:
    """True if the single-valued field is one of the required values."""
    if not required:
        return True
    if not value:
        return False
    return value in required


def match_keyword(text: Optional[str], q: Optional[str]) -> bool:
    """Case-insensitive substring search."""
    if not q:
        return True
    if not text:
        return False
    return q.lower() in text.lower()


def geometry_filter_placeholder(items: Sequence[T], geom: Optional[str] = None) -> List[T]:
    """
    Spatial filter hook. Returns the items unchanged.

    TODO: needs a bbox or polygon intersection contract before it can filter.
    """
    return list(items)
