"""
Staff notification feed: events such as a contract being signed or a map
calibration run, stored in the ``staff_notification_events`` table.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from domain.models import NotificationEvent

from .monitoring import get_logger
from .repository import Repository

TABLE = "staff_notification_events"

logger = get_logger(__name__)


def record_event(
    repo: Repository,
    event_type: str,
    title: str,
    body: str,
    event_data: Optional[Dict[str, Any]] = None,
) -> NotificationEvent:
    """Append an event and return the stored record."""
    row = repo.insert(TABLE, {
        "event_type": event_type,  # contract_signed | calibration_applied | ...
        "title": title,
        "body": body,
        "event_data": event_data or {},
    })
    logger.info(f"{event_type}: {body}")
    return NotificationEvent.model_validate(row)


def recent_events(repo: Repository, limit: int = 50, event_type: Optional[str] = None) -> List[NotificationEvent]:
    filters = {"event_type": event_type} if event_type else None
    return repo.fetch(NotificationEvent, TABLE, filters, order_by="created_at", descending=True)[:limit]
