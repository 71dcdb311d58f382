"""
Stamp search results with the request they came from.
"""
from collections.abc import Mapping
from typing import Any, Dict, Iterable, List

from ..models.schema import ExecutedRequest


def enrich_results(executed: Iterable[ExecutedRequest]) -> List[Dict[str, Any]]:
    """
    Flatten executor slots into one list of enriched result items.

    Each item gets ``scope``, ``workspaceId`` and ``searchEntity`` from its
    slot's descriptor; provenance overrides same-named fields of the raw item.
    Slots whose result is not a list contribute nothing. Non-mapping items
    become provenance-only records.
    """
    enriched: List[Dict[str, Any]] = []
    for slot in executed or []:
        result = slot.get("result")
        if not isinstance(result, list):
            continue
        descriptor = slot.get("descriptor") or {}
        provenance = {
            "scope": descriptor.get("scope"),
            "workspaceId": descriptor.get("workspaceId"),
            "searchEntity": slot.get("resultId", descriptor.get("resultKey")),
        }
        for item in result:
            record = dict(item) if isinstance(item, Mapping) else {}
            record.update(provenance)
            enriched.append(record)
    return enriched
