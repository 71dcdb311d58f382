"""
Option and entity preprocessing that runs before a lookup is planned.
"""
import ipaddress
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Sequence, Union

from .config import DEFAULT_SEARCH_LIMIT, _split_csv
from .error import CyyncError, ErrorType
from ..models.schema import Entity, LookupOptions
from ..search.scopes import DEFAULT_SEARCH_SCOPES, SCOPE_VALUES, get_scope, is_known_scope

PRIVATE_NETWORKS = [
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
]


def _scope_value(scope: Any) -> Any:
    if isinstance(scope, Mapping):
        return scope.get("value")
    return scope


def _coerce_limit(value: Any) -> Optional[int]:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        limit = int(value)
    except (TypeError, ValueError):
        return None
    if isinstance(value, float) and value != limit:
        return None
    return limit


def normalize_options(options: Optional[Mapping]) -> LookupOptions:
    """
    Bring user options into the shape the planner expects.

    - workspaceIds: comma-separated string -> list of trimmed IDs
    - searchScopes: values -> registry ``{value, display}`` entries; missing or
      empty -> the default scopes
    - searchLimit: positive int, default 50

    Raises:
        CyyncError: searchLimit is not a positive integer
    """
    options = dict(options or {})

    workspace_ids = options.get("workspaceIds")
    if isinstance(workspace_ids, str):
        workspace_ids = _split_csv(workspace_ids)
    options["workspaceIds"] = workspace_ids if workspace_ids is not None else []

    scopes = options.get("searchScopes")
    if isinstance(scopes, str):
        scopes = _split_csv(scopes)
    if not scopes:
        scopes = list(DEFAULT_SEARCH_SCOPES)
    if isinstance(scopes, (list, tuple)):
        scopes = [get_scope(scope) if isinstance(scope, str) else scope for scope in scopes]
    # anything else is rejected by the planner
    options["searchScopes"] = scopes

    raw_limit = options.get("searchLimit")
    if raw_limit is None or raw_limit == "":
        options["searchLimit"] = DEFAULT_SEARCH_LIMIT
    else:
        limit = _coerce_limit(raw_limit)
        if limit is None or limit < 1:
            raise CyyncError(
                f"Invalid searchLimit option: {raw_limit!r} is not a positive integer",
                error_type=ErrorType.INVALID_OPTIONS,
                details={"searchLimit": repr(raw_limit)},
            )
        options["searchLimit"] = limit

    return options  # type: ignore[return-value]


def validate_options(options: Optional[Mapping]) -> List[Dict[str, str]]:
    """
    Validate user options.

    Returns:
        List of ``{key, message}`` errors; empty when the options are usable
    """
    options = options or {}
    errors: List[Dict[str, str]] = []

    for key in ("url", "accessToken"):
        value = options.get(key)
        if not isinstance(value, str) or not value.strip():
            errors.append({"key": key, "message": "* Required"})

    url = options.get("url")
    if isinstance(url, str) and url.strip():
        if not url.startswith(("http://", "https://")):
            errors.append({"key": "url", "message": "Your Url must begin with http:// or https://"})
        elif url.endswith("/"):
            errors.append({"key": "url", "message": "Your Url must not end with a /"})

    scopes = options.get("searchScopes")
    if isinstance(scopes, str):
        scopes = _split_csv(scopes)
    if scopes:
        invalid = [str(_scope_value(scope)) for scope in scopes if not is_known_scope(_scope_value(scope))]
        if invalid:
            errors.append(
                {
                    "key": "searchScopes",
                    "message": (
                        f"Invalid search scopes: {', '.join(invalid)}. "
                        f"Valid options are: {', '.join(SCOPE_VALUES)}"
                    ),
                }
            )

    raw_limit = options.get("searchLimit")
    if raw_limit is not None and raw_limit != "":
        limit = _coerce_limit(raw_limit)
        if limit is None or limit < 1:
            errors.append({"key": "searchLimit", "message": "Search limit must be a positive integer"})

    return errors


def is_private_ip(value: Any) -> bool:
    try:
        address = ipaddress.ip_address(str(value).strip())
    except ValueError:
        return False
    return any(address in network for network in PRIVATE_NETWORKS if network.version == address.version)


def remove_private_ips(entities: Optional[Sequence[Entity]]) -> List[Entity]:
    """Drop IP entities in the RFC 1918 ranges; everything else passes through."""
    return [
        entity
        for entity in entities or []
        if not (entity.get("isIP") and is_private_ip(entity.get("value")))
    ]


def get_entities_of_types(types: Union[str, Sequence[str]], entities: Optional[Sequence[Entity]]) -> List[Entity]:
    """Select entities having any of ``types`` (case-insensitive)."""
    wanted = {types.lower()} if isinstance(types, str) else {t.lower() for t in types or []}
    if not wanted:
        return []
    return [
        entity
        for entity in entities or []
        if any(str(t).lower() in wanted for t in entity.get("types") or [])
    ]
