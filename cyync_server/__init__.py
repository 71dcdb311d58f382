"""CYYNC Lookup Server - search CYYNC workspaces for entities and summarize what was found."""
from .core import CyyncLookupError, run_lookup
from .core.config import DEFAULT_CONCURRENCY_LIMIT, DEFAULT_SEARCH_LIMIT, get_cyync_config
from .search.scopes import AVAILABLE_SCOPES, get_available_scopes

__all__ = [
    "run_lookup",
    "CyyncLookupError",
    "DEFAULT_CONCURRENCY_LIMIT",
    "DEFAULT_SEARCH_LIMIT",
    "get_cyync_config",
    "AVAILABLE_SCOPES",
    "get_available_scopes",
]
