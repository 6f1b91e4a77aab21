"""
Staff schedules: calendar events in the ``staff_calendar_events`` table.

Events are kept per staff member. An ongoing event shows on every matching
day instead of only its own date.
"""
from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from domain.models import CalendarEvent

from .monitoring import get_logger
from .portal import save_row
from .repository import Repository

EVENTS = "staff_calendar_events"

logger = get_logger(__name__)


def js_weekday(d: date) -> int:
    """Weekday number with Sunday as 0, the convention stored in day_of_week."""
    return (d.weekday() + 1) % 7


def list_events(repo: Repository, staff_id: str) -> List[CalendarEvent]:
    rows = repo.select(EVENTS, {"staff_id": staff_id})
    # Same ordering as the schedule view: by date, then start time
    rows.sort(key=lambda r: (r.get("event_date") or "", r.get("start_time") or ""))
    return [CalendarEvent.model_validate(r) for r in rows]


def add_event(repo: Repository, staff_id: str, data: Dict[str, Any]) -> CalendarEvent:
    title = (data.get("title") or "").strip()
    if not staff_id or not title:
        raise ValueError("Please enter a title")
    start, end = data.get("start_time") or None, data.get("end_time") or None
    if start and end and end < start:
        raise ValueError("End time cannot be before the start time")
    payload = {
        "staff_id": staff_id,
        "event_date": data.get("event_date") or date.today().isoformat(),
        "title": title,
        "description": data.get("description") or None,
        "start_time": start,
        "end_time": end,
        "is_ongoing": bool(data.get("is_ongoing")),
        "category": data.get("category") or "work",
    }
    if payload["is_ongoing"] and data.get("day_of_week") is not None:
        payload["day_of_week"] = int(data["day_of_week"])
    event = save_row(repo, CalendarEvent, EVENTS, payload)
    logger.info(f"Event '{event.title}' added for {staff_id}")
    return event


def delete_event(repo: Repository, event_id: str) -> None:
    repo.delete(EVENTS, event_id)


def occurs_on(event: CalendarEvent, day: date) -> bool:
    if event.is_ongoing:
        return event.day_of_week is None or event.day_of_week == js_weekday(day)
    return event.event_date == day


def events_for_day(events: List[CalendarEvent], day: date) -> List[CalendarEvent]:
    return [e for e in events if occurs_on(e, day)]


def week_days(anchor: Optional[date] = None, offset: int = 0) -> List[date]:
    """Monday..Sunday of the week containing ``anchor`` shifted by ``offset`` weeks."""
    d = (anchor or date.today()) + timedelta(weeks=offset)
    monday = d - timedelta(days=d.weekday())
    return [monday + timedelta(days=i) for i in range(7)]
