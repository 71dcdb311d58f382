"""
Type transformers: map raw result items onto canonical record shapes and
compute per-type summary statistics.
"""
import math
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from ..models.schema import TypeBucket
from .classifier import KnownType, ResultKind
from .fields import as_number, first_present, unique_truthy

FieldTable = List[Tuple[str, Tuple[str, ...]]]

# Canonical field -> ordered alternatives; the first present value wins
ASSET_FIELDS: FieldTable = [
    ("id", ("id", "assetId")),
    ("name", ("name", "hostname", "deviceName")),
    ("ipAddress", ("ipAddress", "ip")),
    ("macAddress", ("macAddress", "mac")),
    ("riskScore", ("riskScore", "riskLevel")),
    ("lastSeen", ("lastSeen", "updatedAt")),
    ("status", ("status",)),
    ("workspaceId", ("workspaceId",)),
]

FORM_FIELDS: FieldTable = [
    ("id", ("id", "formId")),
    ("title", ("title", "name")),
    ("type", ("type", "formType")),
    ("status", ("status",)),
    ("createdAt", ("createdAt", "created")),
    ("updatedAt", ("updatedAt", "modified")),
    ("author", ("author", "createdBy")),
    ("workspaceId", ("workspaceId",)),
]

PAGE_FIELDS: FieldTable = [
    ("id", ("id", "pageId")),
    ("title", ("title", "name")),
    ("type", ("type", "pageType")),
    ("status", ("status",)),
    ("createdAt", ("createdAt", "created")),
    ("updatedAt", ("updatedAt", "modified")),
    ("author", ("author", "createdBy")),
    ("workspaceId", ("workspaceId",)),
]

TASK_FIELDS: FieldTable = [
    ("id", ("id", "taskId")),
    ("title", ("title", "name")),
    ("type", ("type", "taskType")),
    ("status", ("status",)),
    ("priority", ("priority",)),
    ("assignee", ("assignee", "assignedTo")),
    ("createdAt", ("createdAt", "created")),
    ("updatedAt", ("updatedAt", "modified")),
    ("workspaceId", ("workspaceId",)),
]

GENERIC_FIELDS: FieldTable = [
    ("id", ("id",)),
    ("name", ("name", "title")),
]

RISK_ALIASES = ("riskScore", "riskLevel")
HIGH_RISK_THRESHOLD = 7
RECENT_WINDOW = timedelta(days=7)
ACTIVE_TASK_STATUSES = ("active", "in_progress")


def _apply_table(item: Any, table: FieldTable, defaults: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    record: Dict[str, Any] = {}
    for field, aliases in table:
        value = first_present(item, aliases)
        if value is None and defaults and field in defaults:
            value = defaults[field]
        record[field] = value
    record["_raw"] = item
    return record


def transform_asset(item: Any) -> Dict[str, Any]:
    return _apply_table(item, ASSET_FIELDS, defaults={"status": "unknown"})


def transform_form(item: Any) -> Dict[str, Any]:
    return _apply_table(item, FORM_FIELDS)


def transform_page(item: Any) -> Dict[str, Any]:
    return _apply_table(item, PAGE_FIELDS)


def transform_task(item: Any) -> Dict[str, Any]:
    return _apply_table(item, TASK_FIELDS)


def transform_generic(item: Any) -> Dict[str, Any]:
    return _apply_table(item, GENERIC_FIELDS)


def round_half_up(value: float, digits: int = 1) -> float:
    """Round halves away from zero for positive values (1.25 -> 1.3)."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a result timestamp into an aware UTC-based datetime.

    Accepts ISO-8601 strings (a trailing "Z" included), epoch milliseconds and
    datetime objects. Naive values are taken as UTC. Returns None when the
    value cannot be parsed.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, bool):
        return None
    elif isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text[-1] in ("Z", "z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_recent(value: Any, now: Optional[datetime] = None) -> bool:
    """True when ``value`` is strictly later than seven days before ``now``."""
    timestamp = parse_timestamp(value)
    if timestamp is None:
        return False
    now = parse_timestamp(now) if now is not None else datetime.now(timezone.utc)
    if now is None:
        return False
    return timestamp > now - RECENT_WINDOW


def average_risk(items: Sequence[Any]) -> float:
    scores = [as_number(first_present(item, RISK_ALIASES)) for item in items]
    scores = [score for score in scores if score is not None]
    if not scores:
        return 0
    return round_half_up(sum(scores) / len(scores))


def summarize_assets(items: Sequence[Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    high_risk = 0
    for item in items:
        score = as_number(first_present(item, RISK_ALIASES))
        if score is not None and score > HIGH_RISK_THRESHOLD:
            high_risk += 1
    return {
        "totalAssets": len(items),
        "avgRiskScore": average_risk(items),
        "highRiskCount": high_risk,
    }


def summarize_forms(items: Sequence[Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    return {
        "totalForms": len(items),
        "formTypes": unique_truthy(first_present(item, ("type", "formType")) for item in items),
        "recentForms": sum(1 for item in items if is_recent(first_present(item, ("createdAt", "created")), now)),
    }


def summarize_pages(items: Sequence[Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    recent_fields = ("createdAt", "created", "updatedAt", "modified")
    return {
        "totalPages": len(items),
        "pageTypes": unique_truthy(first_present(item, ("type", "pageType")) for item in items),
        "recentPages": sum(1 for item in items if is_recent(first_present(item, recent_fields), now)),
    }


def summarize_tasks(items: Sequence[Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    active = 0
    for item in items:
        if isinstance(item, Mapping) and item.get("status") in ACTIVE_TASK_STATUSES:
            active += 1
    return {
        "totalTasks": len(items),
        "activeTasks": active,
        "taskTypes": unique_truthy(first_present(item, ("type", "taskType")) for item in items),
    }


Transformer = Callable[[Any], Dict[str, Any]]
Summarizer = Callable[[Sequence[Any], Optional[datetime]], Dict[str, Any]]

TRANSFORMERS: Dict[KnownType, Tuple[Transformer, Summarizer]] = {
    KnownType.ASSETS: (transform_asset, summarize_assets),
    KnownType.FORMS: (transform_form, summarize_forms),
    KnownType.PAGES: (transform_page, summarize_pages),
    KnownType.TASKS: (transform_task, summarize_tasks),
}


def process_bucket(kind: ResultKind, items: Sequence[Any], now: Optional[datetime] = None) -> TypeBucket:
    """
    Build the detail-tree bucket for one result type.

    Known types get their dedicated transformer and summary; every other type
    gets generic records, its name under ``type`` and ``{"total": n}``.
    """
    items = list(items)
    if kind.known is not None:
        transform, summarize = TRANSFORMERS[kind.known]
        return {
            "count": len(items),
            "items": [transform(item) for item in items],
            "summary": summarize(items, now),
        }
    return {
        "count": len(items),
        "type": kind.name,
        "items": [transform_generic(item) for item in items],
        "summary": {"total": len(items)},
    }
