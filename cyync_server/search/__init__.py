"""Search module: scopes, request planning, parallel execution, and enrichment."""
from .enricher import enrich_results
from .planner import build_endpoint, build_search_requests, normalize_search_scopes, normalize_workspace_ids
from .scopes import AVAILABLE_SCOPES, DEFAULT_SEARCH_SCOPES, SCOPE_VALUES, get_available_scopes, get_scope_display
from .searcher import get_path, is_populated, requests_in_parallel

__all__ = [
    "AVAILABLE_SCOPES",
    "DEFAULT_SEARCH_SCOPES",
    "SCOPE_VALUES",
    "get_available_scopes",
    "get_scope_display",
    "build_endpoint",
    "build_search_requests",
    "normalize_search_scopes",
    "normalize_workspace_ids",
    "get_path",
    "is_populated",
    "requests_in_parallel",
    "enrich_results",
]
