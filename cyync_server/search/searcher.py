"""
Search execution module: concurrency-bounded parallel requests.
"""
import asyncio
import logging
from collections.abc import Mapping, Sequence
from typing import Any, List, Optional

from ..core.config import DEFAULT_CONCURRENCY_LIMIT
from ..core.error import TransportError, translate_transport_error
from ..core.logger import get_logger
from ..models.schema import ExecutedRequest, RequestDescriptor, ResponseEnvelope
from ..retrievers.base import Transport


def get_path(value: Any, path: Optional[str]) -> Any:
    """
    Read a dotted path such as ``body.results`` out of a response envelope.

    Numeric segments index into lists. A missing segment yields None; an empty
    path returns the value itself.
    """
    if not path:
        return value
    current = value
    for key in path.split("."):
        if isinstance(current, Mapping):
            if key not in current:
                return None
            current = current[key]
        elif isinstance(current, Sequence) and not isinstance(current, (str, bytes)) and key.isdigit():
            index = int(key)
            if index >= len(current):
                return None
            current = current[index]
        else:
            return None
    return current


def is_populated(result: Any) -> bool:
    """True for a non-empty list of results."""
    return isinstance(result, (list, tuple)) and len(result) > 0


async def requests_in_parallel(
    descriptors: Optional[List[RequestDescriptor]],
    transport: Transport,
    response_path: Optional[str] = None,
    limit: int = DEFAULT_CONCURRENCY_LIMIT,
    only_return_populated: bool = True,
    logger: Optional[logging.Logger] = None,
) -> List[ExecutedRequest]:
    """
    Execute search requests with at most ``limit`` in flight.

    Requests start in list order and the returned slots keep that order. The
    first failure aborts the batch: no further requests are started and the
    error propagates (transport errors are translated to their readable form).
    Requests already in flight are left to settle.

    Args:
        descriptors: Planned search requests
        transport: Request-execution collaborator
        response_path: Dotted path of the result list; defaults to each
            descriptor's responseExtractionPath
        limit: Maximum simultaneous requests
        only_return_populated: Drop slots whose result is not a non-empty list
        logger: Logger instance

    Returns:
        One slot per kept request: resultId, descriptor and extracted result
    """
    logger = logger or get_logger()
    descriptors = list(descriptors or [])
    if not descriptors:
        return []

    limit = max(1, int(limit or DEFAULT_CONCURRENCY_LIMIT))
    slots: List[Optional[ExecutedRequest]] = [None] * len(descriptors)
    pending = iter(range(len(descriptors)))
    aborted = False

    async def _run_one(descriptor: RequestDescriptor) -> ResponseEnvelope:
        try:
            return await transport.execute(descriptor)
        except TransportError as exc:
            raise translate_transport_error(exc) from exc

    async def _worker() -> None:
        nonlocal aborted
        for index in pending:
            if aborted:
                return
            descriptor = descriptors[index]
            try:
                envelope = await _run_one(descriptor)
            except Exception:
                aborted = True
                raise
            path = response_path if response_path is not None else descriptor.get("responseExtractionPath")
            slots[index] = {
                "resultId": descriptor["resultKey"],
                "descriptor": descriptor,
                "result": get_path(envelope, path),
            }

    logger.debug("Executing %s requests (limit=%s)", len(descriptors), limit)
    await asyncio.gather(*[_worker() for _ in range(min(limit, len(descriptors)))])

    results: List[ExecutedRequest] = [slot for slot in slots if slot is not None]
    if only_return_populated:
        results = [slot for slot in results if is_populated(slot["result"])]

    logger.debug(
        "Requests finished: %s executed, %s returned",
        len(descriptors),
        len(results),
    )
    return results
