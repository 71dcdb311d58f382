"""
Result classification and per-entity matching.
"""
from collections.abc import Mapping
from enum import Enum
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence, Union

from ..models.schema import Entity
from .fields import is_present

UNKNOWN_TYPE = "unknown"


class KnownType(Enum):
    """Record types with a dedicated transformer."""
    ASSETS = "assets"
    FORMS = "forms"
    PAGES = "pages"
    TASKS = "tasks"


class ResultKind(NamedTuple):
    """
    Classification outcome.

    ``known`` is set for the four dedicated record types; ``name`` is always the
    bucket key used in the detail tree.
    """
    known: Optional[KnownType]
    name: str


_KNOWN_BY_NAME: Dict[str, KnownType] = {kind.value: kind for kind in KnownType}


def kind_for(name: str) -> ResultKind:
    return ResultKind(_KNOWN_BY_NAME.get(name), name)


def _string_field(field: str) -> Callable[[Mapping], Optional[str]]:
    def rule(item: Mapping) -> Optional[str]:
        value = item.get(field)
        if isinstance(value, str) and value:
            return value
        return None
    return rule


def _identifier(fields: Sequence[str], name: str) -> Callable[[Mapping], Optional[str]]:
    def rule(item: Mapping) -> Optional[str]:
        if any(is_present(item.get(field)) for field in fields):
            return name
        return None
    return rule


# First matching rule wins
CLASSIFICATION_RULES: List[Callable[[Mapping], Optional[str]]] = [
    _string_field("scope"),
    _string_field("type"),
    _string_field("source"),
    _string_field("_type"),
    _identifier(("assetId", "deviceId"), KnownType.ASSETS.value),
    _identifier(("formId", "templateId"), KnownType.FORMS.value),
    _identifier(("pageId",), KnownType.PAGES.value),
    _identifier(("taskId",), KnownType.TASKS.value),
]


def determine_result_type(item: Any) -> ResultKind:
    """
    Classify one enriched result item.

    The enrichment ``scope`` is the most reliable signal, then the item's own
    ``type``/``source``/``_type`` strings, then identifier fields. Anything else
    (including non-mapping items) is ``unknown``.
    """
    if not isinstance(item, Mapping):
        return kind_for(UNKNOWN_TYPE)
    for rule in CLASSIFICATION_RULES:
        name = rule(item)
        if name:
            return kind_for(name)
    return kind_for(UNKNOWN_TYPE)


def group_by_type(items: Sequence[Any]) -> Dict[ResultKind, List[Any]]:
    """Group items by kind, keys in first-discovery order."""
    grouped: Dict[ResultKind, List[Any]] = {}
    for item in items:
        grouped.setdefault(determine_result_type(item), []).append(item)
    return grouped


def get_results_for_entity(
    entity: Entity,
    results: Optional[Sequence[Any]],
    only_one_result_expected: bool = False,
    only_return_unique_results: bool = False,
) -> Union[List[Any], Any, None]:
    """
    Select the results produced by searching for ``entity``.

    Args:
        entity: Entity whose ``value`` is matched against ``searchEntity``
        results: Enriched result items
        only_one_result_expected: Return the first match (or None) instead of a list
        only_return_unique_results: Drop later duplicates (deep equality)

    Returns:
        Matching items in input order, or a single item/None
    """
    value = entity.get("value") if isinstance(entity, Mapping) else None
    matched = [
        item
        for item in results or []
        if isinstance(item, Mapping) and item.get("searchEntity") == value
    ]

    if only_return_unique_results:
        unique: List[Any] = []
        for item in matched:
            if item not in unique:
                unique.append(item)
        matched = unique

    if only_one_result_expected:
        return matched[0] if matched else None
    return matched
