import argparse
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from dotenv import load_dotenv
from mcp.server.fastmcp import FastMCP


def _load_env() -> None:
    """
    Load environment variables from the project root `.env`.

    Do not rely on current working directory (MCP hosts may import this module).
    """
    project_root = Path(__file__).resolve().parents[2]
    env_path = project_root / ".env"
    if env_path.exists():
        load_dotenv(env_path, override=True)
        return

    # Fallback to CWD for compatibility
    cwd_env = Path.cwd() / ".env"
    if cwd_env.exists():
        load_dotenv(cwd_env, override=True)


_load_env()

from .config import get_cyync_config, get_log_dir
from .error import CyyncLookupError
from .logger import LOGGER_NAME, get_logger, setup_logger
from .pipeline import run_lookup
from .preprocessor import validate_options
from ..models.schema import Entity
from ..search.scopes import get_available_scopes

logger = get_logger()

# Keys whose values should be masked when printing env
_ENV_MASK_KEYS = frozenset({"CYYNC_ACCESS_TOKEN"})

mcp = FastMCP("CyyncLookupServer")


def parse_args(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="CYYNC Lookup MCP Server")
    parser.add_argument("--port", type=int, default=50001, help="Server port (default: 50001)")
    parser.add_argument("--host", default="0.0.0.0", help="Server host (default: 0.0.0.0)")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Log file path (default: CYYNC_LOG_DIR/cyync_<date>.log or ./cyync_<date>.log)",
    )
    parser.add_argument(
        "--transport",
        default="streamable-http",
        choices=["stdio", "sse", "streamable-http"],
        help="MCP transport (default: streamable-http)",
    )
    return parser.parse_args(argv)


def print_startup_env() -> None:
    """
    Print relevant environment variables at server startup.
    Masks sensitive values.
    """
    keys = [
        "CYYNC_URL", "CYYNC_ACCESS_TOKEN", "CYYNC_ROLE_ID", "CYYNC_WORKSPACE_IDS",
        "CYYNC_SEARCH_SCOPES", "CYYNC_SEARCH_LIMIT", "CYYNC_CONCURRENCY_LIMIT",
        "CYYNC_REQUEST_TIMEOUT", "CYYNC_LOG_DIR",
    ]
    # stdout belongs to the protocol under the stdio transport
    out = sys.stderr
    print("=== CYYNC lookup server env ===", file=out)
    for k in keys:
        v = os.getenv(k)
        if v is None or v == "":
            print(f"  {k}= (unset)", file=out)
        elif k in _ENV_MASK_KEYS:
            print(f"  {k}= *** (set)", file=out)
        else:
            print(f"  {k}= {v}", file=out)
    print("===============================", file=out)


def _coerce_entity(entity: Union[str, Dict[str, Any]]) -> Entity:
    if isinstance(entity, str):
        return {"value": entity, "types": []}
    coerced = dict(entity)
    if "types" not in coerced and coerced.get("type"):
        coerced["types"] = [coerced["type"]]
    return coerced  # type: ignore[return-value]


def build_options(
    workspace_ids: Optional[Union[str, List[str]]] = None,
    search_scopes: Optional[List[str]] = None,
    search_limit: Optional[int] = None,
) -> Dict[str, Any]:
    """Environment configuration with per-call overrides."""
    options = get_cyync_config()
    if workspace_ids:
        options["workspaceIds"] = workspace_ids
    if search_scopes:
        options["searchScopes"] = search_scopes
    if search_limit is not None:
        options["searchLimit"] = search_limit
    return options


@mcp.tool()
async def lookup_entities(
    entities: List[Union[str, Dict[str, Any]]],
    workspace_ids: Optional[List[str]] = None,
    search_scopes: Optional[List[str]] = None,
    search_limit: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Search CYYNC workspaces for assets, forms, pages and tasks related to each entity.

    Args:
        entities: Entity values, or objects with ``value`` and ``types``
        workspace_ids: Workspaces to search (defaults to CYYNC_WORKSPACE_IDS)
        search_scopes: Any of assets, forms, pages, tasks (defaults to CYYNC_SEARCH_SCOPES)
        search_limit: Maximum results per workspace and scope

    Returns:
        One result per entity with summary tags and details grouped by type
    """
    batch = [_coerce_entity(e) for e in entities or []]
    if not batch:
        return {"code": -1, "message": "No entities", "results": [], "n_entities": 0, "n_matched": 0}

    options = build_options(workspace_ids, search_scopes, search_limit)
    errors = validate_options(options)
    if errors:
        logger.warning("Invalid lookup options: %s", errors)
        return {
            "code": -1,
            "message": "Invalid options",
            "results": [],
            "n_entities": len(batch),
            "n_matched": 0,
            "error": {"detail": "Invalid options", "errors": errors},
        }

    logger.info(
        "Lookup: entities=%s, workspaces=%s, scopes=%s",
        [e.get("value") for e in batch],
        options.get("workspaceIds"),
        options.get("searchScopes"),
    )
    try:
        results = await run_lookup(batch, options, logger=logger)
    except CyyncLookupError as exc:
        return {
            "code": -1,
            "message": exc.detail,
            "results": [],
            "n_entities": len(batch),
            "n_matched": 0,
            "error": exc.to_dict(),
        }

    n_matched = sum(1 for r in results if r["data"] is not None)
    return {
        "code": 0,
        "message": "Success" if n_matched else "No results",
        "results": results,
        "n_entities": len(results),
        "n_matched": n_matched,
    }


@mcp.tool()
def list_search_scopes() -> List[Dict[str, str]]:
    """List the content categories that can be searched in a CYYNC workspace."""
    return get_available_scopes()


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)

    if args.log_file is None:
        date_tag = datetime.now().strftime("%Y%m%d")
        log_file = get_log_dir() / f"cyync_{date_tag}.log"
    else:
        log_file = Path(args.log_file)

    setup_logger(
        name=LOGGER_NAME,
        level=args.log_level,
        log_file=log_file,
        stream=sys.stderr if args.transport == "stdio" else None,
    )
    logger.info(f"Log file: {log_file.resolve()}")

    # Route MCP library logs through the same handlers
    mcp_logger = logging.getLogger("mcp")
    mcp_logger.setLevel(getattr(logging, args.log_level.upper(), logging.INFO))
    mcp_logger.handlers.clear()
    for handler in logger.handlers:
        mcp_logger.addHandler(handler)
    mcp_logger.propagate = False

    mcp.settings.host = args.host
    mcp.settings.port = args.port

    print_startup_env()
    logger.info("Starting CYYNC Lookup MCP Server...")
    mcp.run(transport=args.transport)


if __name__ == "__main__":
    main()
