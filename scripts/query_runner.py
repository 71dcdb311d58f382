#!/usr/bin/env python3
"""
CYYNC query runner: look up entities against a live CYYNC instance from the command line.

Command-line examples:
  python scripts/query_runner.py --access-token TOKEN --role-id 7 --workspace-ids 12,15 --entity 8.8.8.8:IPv4
  python scripts/query_runner.py --search-scopes assets,tasks --entity example.com:domain --output results.json

Unset options fall back to the CYYNC_* environment variables (a project-root .env is loaded).
"""

import argparse
import asyncio
import json
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

# Make the project root importable when run as a plain script
_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from dotenv import load_dotenv

from cyync_server.core.config import get_cyync_config
from cyync_server.core.error import CyyncLookupError
from cyync_server.core.logger import setup_logger
from cyync_server.core.pipeline import run_lookup
from cyync_server.core.preprocessor import validate_options
from cyync_server.results.summary import count_by

DEFAULT_OUTPUT = "cyync-query-results.json"


def parse_entity(text: str) -> Dict[str, Any]:
    """``VALUE[:TYPE]`` -> entity. IPv6 values need an explicit ``:IPv6`` suffix."""
    value, sep, entity_type = text.rpartition(":")
    if not sep or not value or not entity_type.isalnum() or not entity_type[0].isalpha():
        return {"value": text, "types": []}
    return {"value": value, "types": [entity_type]}


def build_options(args: argparse.Namespace) -> Dict[str, Any]:
    options = get_cyync_config()
    overrides = {
        "url": args.url,
        "accessToken": args.access_token,
        "roleId": args.role_id,
        "workspaceIds": args.workspace_ids,
        "searchScopes": args.search_scopes,
        "searchLimit": args.search_limit,
    }
    options.update({k: v for k, v in overrides.items() if v is not None})
    return options


def summarize(result: Dict[str, Any], duration_ms: int) -> Dict[str, Any]:
    """Per-entity report: tags, results by scope and a few sample records."""
    data = result.get("data")
    summary: Dict[str, Any] = {
        "entity": result["entity"].get("value"),
        "entityTypes": result["entity"].get("types") or [],
        "duration": f"{duration_ms}ms",
        "tags": [],
        "totalResults": 0,
        "resultsByScope": {},
        "sampleResults": [],
    }
    if data is None:
        return summary

    details = data["details"]
    raw_items: List[Dict[str, Any]] = []
    for key, bucket in details.items():
        if key == "_metadata":
            continue
        raw_items.extend(item["_raw"] for item in bucket["items"])

    summary.update(
        {
            "tags": data["summary"],
            "totalResults": details["_metadata"]["totalResults"],
            "resultsByScope": count_by(raw_items, "scope"),
            "workspaces": details["_metadata"]["workspaces"],
            "sampleResults": raw_items[:3],
        }
    )
    return summary


async def run(entities: List[Dict[str, Any]], options: Dict[str, Any]) -> List[Dict[str, Any]]:
    started = time.monotonic()
    results = await run_lookup(entities, options)
    duration_ms = int((time.monotonic() - started) * 1000)
    return [summarize(result, duration_ms) for result in results]


def run_cli(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Search CYYNC workspaces for entities and print a per-entity summary.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--url", type=str, default=None, help="CYYNC instance URL (env CYYNC_URL)")
    parser.add_argument("--access-token", type=str, default=None, help="API access token (env CYYNC_ACCESS_TOKEN)")
    parser.add_argument("--role-id", type=str, default=None, help="Role ID (env CYYNC_ROLE_ID)")
    parser.add_argument("--workspace-ids", type=str, default=None, help="Comma-separated workspace IDs")
    parser.add_argument("--search-scopes", type=str, default=None, help="Comma-separated scopes: assets,forms,pages,tasks")
    parser.add_argument("--search-limit", type=int, default=None, help="Maximum results per scope")
    parser.add_argument(
        "--entity",
        action="append",
        default=[],
        metavar="VALUE[:TYPE]",
        help="Entity to look up, repeatable (e.g. 8.8.8.8:IPv4)",
    )
    parser.add_argument("--output", type=str, default=DEFAULT_OUTPUT, help="JSON output file")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args(argv)

    load_dotenv(_project_root / ".env")
    setup_logger(level=args.log_level, stream=sys.stderr)

    if not args.entity:
        parser.error("at least one --entity is required")

    options = build_options(args)
    errors = validate_options(options)
    if errors:
        for error in errors:
            print(f"{error['key']}: {error['message']}", file=sys.stderr)
        return 2

    entities = [parse_entity(text) for text in args.entity]
    try:
        report = asyncio.run(run(entities, options))
    except CyyncLookupError as exc:
        print(f"Lookup failed: {exc.detail}", file=sys.stderr)
        Path(args.output).write_text(json.dumps(exc.to_dict(), ensure_ascii=False, indent=2))
        return 1

    for entry in report:
        tags = ", ".join(entry["tags"]) or "no results"
        print(f"{entry['entity']}: {tags}")
        for scope, count in entry["resultsByScope"].items():
            print(f"  {scope}: {count}")

    Path(args.output).write_text(json.dumps(report, ensure_ascii=False, indent=2, default=str))
    print(f"Wrote {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(run_cli())
