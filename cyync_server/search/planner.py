"""
Planner module: expand entities into one search request per workspace and scope.
"""
import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import quote

from ..core.config import DEFAULT_SEARCH_LIMIT, SEARCH_RESPONSE_PATH
from ..core.error import CyyncError, ErrorType
from ..core.logger import get_logger
from ..models.schema import Entity, RequestDescriptor, SearchScope
from .scopes import get_scope_display


def normalize_workspace_ids(workspace_ids: Any) -> List[str]:
    """
    Coerce the configured workspace IDs to a list.

    A single string is one workspace ID; splitting comma-separated values is
    done earlier, when options are normalized.
    """
    if workspace_ids is None:
        return []
    if isinstance(workspace_ids, str):
        return [workspace_ids] if workspace_ids else []
    if isinstance(workspace_ids, Sequence):
        return [str(w) for w in workspace_ids if w is not None and str(w) != ""]
    raise CyyncError(
        f"Invalid workspaceIds option: expected a string or a list, got {type(workspace_ids).__name__}",
        error_type=ErrorType.INVALID_OPTIONS,
        details={"workspaceIds": repr(workspace_ids)},
    )


def normalize_search_scopes(search_scopes: Any) -> List[SearchScope]:
    """
    Coerce the configured scopes to ``{value, display}`` entries.

    Entries may be mappings or bare scope values. ``None`` means no scopes.
    """
    if search_scopes is None:
        return []
    if isinstance(search_scopes, (str, bytes, Mapping)) or not isinstance(search_scopes, Sequence):
        raise CyyncError(
            f"Invalid searchScopes option: expected a list of scopes, got {type(search_scopes).__name__}",
            error_type=ErrorType.INVALID_OPTIONS,
            details={"searchScopes": repr(search_scopes)},
        )

    scopes: List[SearchScope] = []
    for entry in search_scopes:
        if isinstance(entry, Mapping):
            value = entry.get("value")
            display = entry.get("display")
        else:
            value, display = entry, None
        if not isinstance(value, str) or not value:
            raise CyyncError(
                f"Invalid search scope entry: {entry!r}",
                error_type=ErrorType.INVALID_OPTIONS,
                details={"searchScopes": repr(search_scopes)},
            )
        scopes.append({"value": value, "display": display or get_scope_display(value)})
    return scopes


def build_endpoint(workspace_id: str, scope: str) -> str:
    """Relative API path for one workspace/scope search."""
    return f"workspaces/{quote(workspace_id, safe='')}/{quote(scope, safe='')}/"


def build_search_requests(
    entities: Optional[Sequence[Entity]],
    options: Mapping,
    response_path: str = SEARCH_RESPONSE_PATH,
    logger: Optional[logging.Logger] = None,
) -> List[RequestDescriptor]:
    """
    Plan one request per (entity, workspace, scope) triple.

    Args:
        entities: Entities to look up
        options: Lookup options with workspaceIds, searchScopes and searchLimit
        response_path: Dotted path of the result list inside each response
        logger: Logger instance

    Returns:
        Request descriptors in entity -> workspace -> scope order
    """
    logger = logger or get_logger()
    if options is None:
        raise CyyncError("Lookup options are required", error_type=ErrorType.INVALID_OPTIONS)

    workspace_ids = normalize_workspace_ids(options.get("workspaceIds"))
    scopes = normalize_search_scopes(options.get("searchScopes"))
    search_limit = options.get("searchLimit") or DEFAULT_SEARCH_LIMIT

    requests: List[RequestDescriptor] = []
    for entity in entities or []:
        value = entity.get("value")
        value = "" if value is None else str(value)
        entity_types = list(entity.get("types") or [])
        for workspace_id in workspace_ids:
            for scope in scopes:
                requests.append(
                    {
                        "resultKey": value,
                        "workspaceId": workspace_id,
                        "scope": scope["value"],
                        "scopeDisplay": scope["display"],
                        "entityTypes": entity_types,
                        "endpoint": build_endpoint(workspace_id, scope["value"]),
                        "method": "GET",
                        "query": {"search": value, "type": "", "limit": search_limit},
                        "responseExtractionPath": response_path,
                    }
                )

    by_scope: Dict[str, int] = {}
    for request in requests:
        by_scope[request["scope"]] = by_scope.get(request["scope"], 0) + 1
    logger.debug(
        "Planned %s search requests (entities=%s, workspaces=%s, by_scope=%s)",
        len(requests),
        len(entities or []),
        len(workspace_ids),
        by_scope,
    )
    return requests
