"""
Lookup pipeline: plan -> parallel search -> enrich -> assemble.
"""
import logging
from collections.abc import Mapping
from datetime import datetime
from typing import List, Optional, Sequence

from .config import get_concurrency_limit
from .error import CyyncLookupError, classify_error, log_error, parse_error_to_readable_json
from .logger import get_logger
from .preprocessor import normalize_options
from ..models.schema import Entity, LookupResult
from ..results.assembler import assemble_lookup_results
from ..retrievers.base import Transport
from ..retrievers.cyync import CyyncTransport
from ..search.enricher import enrich_results
from ..search.planner import build_search_requests
from ..search.searcher import requests_in_parallel

LOOKUP_FAILED = "Lookup Failed"


async def run_lookup(
    entities: Optional[Sequence[Entity]],
    options: Optional[Mapping],
    transport: Optional[Transport] = None,
    *,
    limit: Optional[int] = None,
    only_return_populated: bool = True,
    now: Optional[datetime] = None,
    logger: Optional[logging.Logger] = None,
) -> List[LookupResult]:
    """
    Look up a batch of entities across the configured workspaces and scopes.

    Args:
        entities: Entities to look up (``value`` and ``types``)
        options: Lookup options; workspaceIds may be comma-separated
        transport: Request collaborator; a CyyncTransport is built from the
            options when omitted and closed once the lookup finishes
        limit: Maximum simultaneous requests (CYYNC_CONCURRENCY_LIMIT by default)
        only_return_populated: Drop searches that returned no results
        now: Evaluation time for recency statistics
        logger: Logger instance

    Returns:
        One ``{entity, data}`` result per entity, in input order

    Raises:
        CyyncLookupError: planning, request or assembly failed
    """
    logger = logger or get_logger()
    entities = list(entities or [])
    logger.debug("Lookup for %s entities: %s", len(entities), [e.get("value") for e in entities])

    owns_transport = False
    try:
        normalized = normalize_options(options)
        descriptors = build_search_requests(entities, normalized, logger=logger)
        if transport is None and descriptors:
            transport = CyyncTransport.from_options(normalized, logger=logger)
            owns_transport = True

        executed = await requests_in_parallel(
            descriptors,
            transport,
            limit=limit or get_concurrency_limit(),
            only_return_populated=only_return_populated,
            logger=logger,
        )
        enriched = enrich_results(executed)
        logger.debug("Search returned %s results from %s requests", len(enriched), len(descriptors))

        results = assemble_lookup_results(entities, enriched, options, now=now, logger=logger)
    except Exception as error:
        err = parse_error_to_readable_json(error)
        log_error(error, logger, context={"stage": "lookup", "n_entities": len(entities)})
        raise CyyncLookupError(
            str(error) or LOOKUP_FAILED,
            err,
            error_type=classify_error(error),
            status=getattr(error, "status", None),
        ) from error
    finally:
        if owns_transport:
            transport.close()

    n_matched = sum(1 for result in results if result["data"] is not None)
    logger.info("Lookup finished: %s/%s entities matched", n_matched, len(entities))
    return results
