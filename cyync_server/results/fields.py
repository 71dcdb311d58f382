"""
Field access helpers for loosely-shaped search results.
"""
from collections.abc import Mapping
from typing import Any, Iterable, List, Optional, Sequence


def is_present(value: Any) -> bool:
    """
    True when a field carries a usable value.

    - None / "" -> False
    - empty list / dict / tuple / set -> False
    - 0, False and every other value -> True
    """
    if value is None:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, (list, tuple, dict, set, frozenset)):
        return len(value) > 0
    return True


def first_present(item: Any, keys: Sequence[str]) -> Any:
    """Value of the first key in ``keys`` that is present on ``item``, else None."""
    if not isinstance(item, Mapping):
        return None
    for key in keys:
        value = item.get(key)
        if is_present(value):
            return value
    return None


def as_number(value: Any) -> Optional[float]:
    """Numeric values only; bools and numeric-looking strings are not scores."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    return None


def unique_truthy(values: Iterable[Any]) -> List[Any]:
    """Ordered de-duplication of truthy values; unhashable values are fine."""
    unique: List[Any] = []
    for value in values:
        if value and value not in unique:
            unique.append(value)
    return unique
