"""Grouping helpers shared by the statistics and win-equity code."""

from __future__ import annotations

from typing import Callable, Dict, Hashable, Iterable, List, TypeVar

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


def group_by(items: Iterable[T], get_key: Callable[[T], K]) -> Dict[K, List[T]]:
    """Group items by a derived key, preserving first-seen key order.

    Example:
        >>> group_by(["Bolt", "bolt", "Island"], str.lower)
        {'bolt': ['Bolt', 'bolt'], 'island': ['Island']}
    """
    groups: Dict[K, List[T]] = {}
    for item in items:
        groups.setdefault(get_key(item), []).append(item)
    return groups
