"""
Snapshot copying and change detection.
"""

import copy
import math
from typing import Any, List, Mapping, TypeVar

T = TypeVar('T')


def clone(value: T) -> T:
    """Independent deep copy; snapshots never share objects with callers."""
    return copy.deepcopy(value)


def changed_fields(old: Mapping[str, Any], new: Mapping[str, Any]) -> List[str]:
    """
    Names of the fields whose values differ structurally between two snapshots.

    Both snapshots come from the same schema, so they have the same keys; the
    order of ``old`` is kept. Two ``nan`` floats count as unchanged, so a
    field holding ``nan`` does not report a change on every reload.
    """
    return [key for key in old if not _same(old[key], new.get(key))]


def _same(old: Any, new: Any) -> bool:
    if old is new or old == new:
        return True
    # nan != nan; two nan floats are the same setting
    return isinstance(old, float) and isinstance(new, float) and math.isnan(old) and math.isnan(new)
