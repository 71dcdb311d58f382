"""
Assemble per-entity lookup results from enriched search results.
"""
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from ..core.logger import get_logger
from ..models.schema import Entity, LookupResult, ResultMetadata, TypeBucket, build_lookup_result
from .classifier import ResultKind, get_results_for_entity, group_by_type
from .summary import build_metadata, create_summary_tags
from .transformers import process_bucket

METADATA_KEY = "_metadata"


@dataclass
class OrganizedResults:
    """Type buckets in discovery order plus the result-set metadata."""
    buckets: Dict[ResultKind, TypeBucket] = field(default_factory=dict)
    metadata: Optional[ResultMetadata] = None

    def to_dict(self) -> Dict[str, Any]:
        """Detail tree: type name -> bucket, with ``_metadata`` as the reserved key."""
        details: Dict[str, Any] = {kind.name: bucket for kind, bucket in self.buckets.items()}
        details[METADATA_KEY] = self.metadata
        return details


def organize_results_by_type(
    results: Sequence[Any],
    options: Optional[Mapping] = None,
    now: Optional[datetime] = None,
) -> OrganizedResults:
    grouped = group_by_type(results)
    buckets = {kind: process_bucket(kind, items, now) for kind, items in grouped.items()}
    return OrganizedResults(
        buckets=buckets,
        metadata=build_metadata(results, grouped.keys(), options),
    )


def assemble_lookup_results(
    entities: Optional[Sequence[Entity]],
    results: Sequence[Any],
    options: Optional[Mapping] = None,
    now: Optional[datetime] = None,
    logger: Optional[logging.Logger] = None,
) -> List[LookupResult]:
    """
    Build one lookup result per entity, in input order.

    Entities without matching results get ``data: None``.

    Args:
        entities: Looked-up entities
        results: Enriched result items for the whole batch
        options: Lookup options (only ``searchScopes`` is read)
        now: Evaluation time for recency statistics
        logger: Logger instance

    Returns:
        List of ``{entity, data}`` results
    """
    logger = logger or get_logger()
    lookup_results: List[LookupResult] = []
    for entity in entities or []:
        matched = get_results_for_entity(entity, results)
        if not matched:
            lookup_results.append(build_lookup_result(entity=entity))
            continue

        organized = organize_results_by_type(matched, options, now)
        lookup_results.append(
            build_lookup_result(
                entity=entity,
                summary=create_summary_tags(organized.buckets),
                details=organized.to_dict(),
            )
        )
        logger.debug(
            "Entity %s: %s results across types %s",
            entity.get("value"),
            len(matched),
            [kind.name for kind in organized.buckets],
        )
    return lookup_results
