"""
Scope registry: content categories that can be searched in a CYYNC workspace.
"""
from typing import Dict, List, Optional

from ..models.schema import SearchScope

AVAILABLE_SCOPES: List[SearchScope] = [
    {"value": "assets", "display": "Assets"},
    {"value": "forms", "display": "Forms"},
    {"value": "pages", "display": "Pages"},
    {"value": "tasks", "display": "Tasks"},
]

SCOPE_VALUES: List[str] = [scope["value"] for scope in AVAILABLE_SCOPES]

# Scopes searched when the user has not selected any
DEFAULT_SEARCH_SCOPES: List[str] = ["assets", "forms"]

_DISPLAY_BY_VALUE: Dict[str, str] = {scope["value"]: scope["display"] for scope in AVAILABLE_SCOPES}


def get_available_scopes() -> List[SearchScope]:
    """Return a fresh copy of every searchable scope."""
    return [dict(scope) for scope in AVAILABLE_SCOPES]  # type: ignore[misc]


def is_known_scope(value: Optional[str]) -> bool:
    return isinstance(value, str) and value in _DISPLAY_BY_VALUE


def get_scope_display(value: str) -> str:
    """Display label for a scope value; unknown values are their own label."""
    return _DISPLAY_BY_VALUE.get(value, value)


def get_scope(value: str) -> SearchScope:
    return {"value": value, "display": get_scope_display(value)}
