"""
Summary aggregation: the ``_metadata`` block and the human-readable tag list.
"""
from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..core.config import _split_csv
from ..models.schema import ResultMetadata, TypeBucket
from ..search.scopes import SCOPE_VALUES
from .classifier import KnownType, ResultKind
from .fields import unique_truthy


def build_metadata(
    items: Sequence[Any],
    kinds: Iterable[ResultKind],
    options: Optional[Mapping] = None,
) -> ResultMetadata:
    """
    Describe one entity's matched result set.

    ``searchScopes`` echoes the configured scopes, or every registry scope when
    none are configured. A comma-separated string is echoed as its parts.
    """
    scopes = (options or {}).get("searchScopes")
    if isinstance(scopes, str):
        scopes = _split_csv(scopes) or None
    return {
        "totalResults": len(items),
        "searchScopes": list(SCOPE_VALUES) if scopes is None else list(scopes),
        "resultTypes": [kind.name for kind in kinds],
        "workspaces": unique_truthy(
            item.get("workspaceId") for item in items if isinstance(item, Mapping)
        ),
    }


def _bucket_for(buckets: Mapping[ResultKind, TypeBucket], known: KnownType) -> Optional[TypeBucket]:
    for kind, bucket in buckets.items():
        if kind.known is known:
            return bucket
    return None


def create_summary_tags(buckets: Mapping[ResultKind, TypeBucket]) -> List[str]:
    """
    Short tags for the result overview, known types first in fixed order.

    Example: ["Assets: 2", "High Risk: 1", "Forms: 3", "incidents: 1"]
    """
    tags: List[str] = []

    assets = _bucket_for(buckets, KnownType.ASSETS)
    if assets is not None:
        tags.append(f"Assets: {assets['count']}")
        if assets["summary"].get("highRiskCount", 0) > 0:
            tags.append(f"High Risk: {assets['summary']['highRiskCount']}")

    forms = _bucket_for(buckets, KnownType.FORMS)
    if forms is not None:
        tags.append(f"Forms: {forms['count']}")
        if forms["summary"].get("recentForms", 0) > 0:
            tags.append(f"Recent: {forms['summary']['recentForms']}")

    pages = _bucket_for(buckets, KnownType.PAGES)
    if pages is not None:
        tags.append(f"Pages: {pages['count']}")

    tasks = _bucket_for(buckets, KnownType.TASKS)
    if tasks is not None:
        tags.append(f"Tasks: {tasks['count']}")
        if tasks["summary"].get("activeTasks", 0) > 0:
            tags.append(f"Active: {tasks['summary']['activeTasks']}")

    for kind, bucket in buckets.items():
        if kind.known is None:
            tags.append(f"{kind.name}: {bucket['count']}")

    return tags


def count_by(items: Iterable[Mapping], field: str) -> Dict[str, int]:
    """Count items per value of ``field``, in first-seen order."""
    counts: Dict[str, int] = {}
    for item in items:
        key = str(item.get(field))
        counts[key] = counts.get(key, 0) + 1
    return counts
