"""
Coaching library: sessions, programmes, drills, exercises, analysis notes
and psychological sessions, one table per kind.
"""
from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Tuple

from domain.models import CoachingItem
from domain.validators import require_fields

from .monitoring import get_logger
from .portal import current_row, save_row
from .repository import Repository, now_iso

logger = get_logger(__name__)

COMMON_FIELDS = ["title", "description", "content", "category", "tags"]

# table -> (label, extra columns the kind uses)
COACHING_KINDS: Dict[str, Tuple[str, List[str]]] = {
    "coaching_sessions": ("Sessions", ["duration"]),
    "coaching_programmes": ("Programmes", ["weeks"]),
    "coaching_drills": ("Drills", ["setup", "equipment", "players_required"]),
    "coaching_exercises": ("Exercises", ["sets", "reps", "rest_time"]),
    "coaching_analysis": ("Analysis", ["analysis_type"]),
    "psychological_sessions": ("Psychological Sessions", ["duration"]),
}

PAGE_SIZE = 20


def _table(kind: str) -> str:
    if kind not in COACHING_KINDS:
        raise ValueError(f"Unknown coaching library: {kind}")
    return kind


def fields_for(kind: str) -> List[str]:
    return COMMON_FIELDS + COACHING_KINDS[_table(kind)][1]


def list_items(
    repo: Repository,
    kind: str,
    category: Optional[str] = None,
    tag: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    per_page: int = PAGE_SIZE,
) -> Tuple[List[CoachingItem], int]:
    """One page of items, newest first, plus the total count after filtering."""
    rows = repo.select(_table(kind), order_by="created_at", descending=True)
    if category and category != "all":
        rows = [r for r in rows if r.get("category") == category]
    if tag and tag != "all":
        rows = [r for r in rows if tag in (r.get("tags") or [])]
    if search:
        needle = search.strip().lower()
        rows = [r for r in rows if needle in (r.get("title") or "").lower()
                or needle in (r.get("description") or "").lower()]
    total = len(rows)
    start = (max(1, page) - 1) * per_page
    return [CoachingItem.model_validate(r) for r in rows[start:start + per_page]], total


def page_count(total: int, per_page: int = PAGE_SIZE) -> int:
    return max(1, math.ceil(total / per_page))


def filter_options(repo: Repository, kind: str) -> Tuple[List[str], List[str]]:
    """Distinct categories and tags used in a library."""
    categories, tags = set(), set()
    for r in repo.select(_table(kind)):
        if r.get("category"):
            categories.add(r["category"])
        tags.update(t for t in (r.get("tags") or []) if t)
    return sorted(categories), sorted(tags)


def parse_tags(text: str) -> List[str]:
    return [t.strip() for t in (text or "").split(",") if t.strip()]


def save_item(repo: Repository, kind: str, data: Dict[str, Any], item_id: Optional[str] = None) -> CoachingItem:
    table = _table(kind)
    require_fields({**current_row(repo, table, item_id), **data}, ["title"])
    allowed = fields_for(kind)
    payload: Dict[str, Any] = {}
    for key, value in data.items():
        if key not in allowed:
            raise ValueError(f"{COACHING_KINDS[kind][0]} have no '{key}' field")
        payload[key] = value if value != "" else None
    if isinstance(payload.get("tags"), str):
        payload["tags"] = parse_tags(payload["tags"])
    elif "tags" in payload and payload["tags"] is None:
        payload["tags"] = []
    payload["updated_at"] = now_iso()
    item = save_row(repo, CoachingItem, table, payload, item_id)
    logger.info(f"{table}/{item.id} {'updated' if item_id else 'created'}")
    return item


def delete_item(repo: Repository, kind: str, item_id: str) -> None:
    repo.delete(_table(kind), item_id)
