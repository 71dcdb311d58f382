import os
from pathlib import Path
from typing import Any, Dict, List, Optional

DEFAULT_SEARCH_LIMIT = 50
DEFAULT_CONCURRENCY_LIMIT = 10
DEFAULT_REQUEST_TIMEOUT = 30.0

# Remote API layout: {url}/api/v1/workspaces/{workspaceId}/{scope}/
API_PREFIX = "api/v1"
SEARCH_RESPONSE_PATH = "body.results"
SUCCESS_STATUS_CODES = (200, 201)


def _split_csv(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def get_cyync_config() -> Dict[str, Any]:
    """
    Lookup options are read from environment variables so secrets stay out of code.
    - CYYNC_URL: base URL of the CYYNC instance, e.g. "https://staging.cyync.com"
    - CYYNC_ACCESS_TOKEN: API access token (must be set in env)
    - CYYNC_ROLE_ID: role ID sent with every request
    - CYYNC_WORKSPACE_IDS: comma-separated workspace IDs
    - CYYNC_SEARCH_SCOPES: comma-separated scope values (assets,forms,pages,tasks)
    - CYYNC_SEARCH_LIMIT: maximum results per scope (default 50)
    """
    return {
        "url": os.getenv("CYYNC_URL", "").strip().rstrip("/"),
        "accessToken": os.getenv("CYYNC_ACCESS_TOKEN", "").strip() or None,
        "roleId": os.getenv("CYYNC_ROLE_ID", "").strip() or None,
        "workspaceIds": _split_csv(os.getenv("CYYNC_WORKSPACE_IDS")),
        "searchScopes": _split_csv(os.getenv("CYYNC_SEARCH_SCOPES")) or None,
        "searchLimit": get_search_limit(),
    }


def get_search_limit() -> int:
    """
    - CYYNC_SEARCH_LIMIT: results per scope query (default 50, minimum 1)
    """
    try:
        limit = int(os.getenv("CYYNC_SEARCH_LIMIT", str(DEFAULT_SEARCH_LIMIT)))
    except ValueError:
        return DEFAULT_SEARCH_LIMIT
    return limit if limit > 0 else DEFAULT_SEARCH_LIMIT


def get_concurrency_limit() -> int:
    """
    - CYYNC_CONCURRENCY_LIMIT: maximum simultaneous in-flight requests (default 10)
    """
    try:
        limit = int(os.getenv("CYYNC_CONCURRENCY_LIMIT", str(DEFAULT_CONCURRENCY_LIMIT)))
    except ValueError:
        return DEFAULT_CONCURRENCY_LIMIT
    return max(1, limit)


def get_request_timeout() -> float:
    """
    Get the per-request HTTP timeout in seconds.
    - CYYNC_REQUEST_TIMEOUT: seconds per request (default 30, minimum 1)
    """
    try:
        timeout = float(os.getenv("CYYNC_REQUEST_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT)))
    except ValueError:
        return DEFAULT_REQUEST_TIMEOUT
    return max(1.0, timeout)


def get_log_dir() -> Path:
    """
    Get the directory for server log files.
    - CYYNC_LOG_DIR: directory for log files
    Defaults to current working directory.
    """
    log_dir = os.getenv("CYYNC_LOG_DIR")
    if log_dir:
        return Path(log_dir)
    return Path.cwd()
