"""
Scouting and performance reports.

Scouting reports (``scouting_reports``) describe a scouted player and can be
linked to a represented player's profile. Performance reports
(``player_analysis`` plus ``performance_report_actions``) score one fixture
action by action; the R90 score is the summed action score per 90 minutes.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from domain.formatting import slugify
from domain.models import PerformanceAction, PerformanceReport, ReportStatus, ScoutingReport
from domain.validators import require_fields

from .monitoring import get_logger
from .portal import current_row, save_row
from .repository import Repository

REPORTS = "scouting_reports"
ANALYSES = "player_analysis"
ACTIONS = "performance_report_actions"

logger = get_logger(__name__)

REPORT_FIELDS = [
    "player_name", "position", "current_club", "nationality", "overall_rating",
    "location", "competition", "match_context", "video_url", "full_match_url",
    "scout_name", "summary", "recommendation", "auto_generated_review", "skill_evaluations",
]


# -- scouting reports ----------------------------------------------------

def scouting_date(month: Any, year: Any) -> str:
    """First day of the scouted month; reports are dated to the month only."""
    if not month or not year:
        raise ValueError("Scouting month and year are required")
    m, y = int(month), int(year)
    if not 1 <= m <= 12:
        raise ValueError("Scouting month must be between 1 and 12")
    return f"{y:04d}-{m:02d}-01"


def list_reports(repo: Repository, player_id: Optional[str] = None, status: Optional[str] = None) -> List[ScoutingReport]:
    filters: Dict[str, Any] = {}
    if player_id:
        filters["linked_player_id"] = player_id
    if status and status != "all":
        filters["status"] = ReportStatus(status).value
    return repo.fetch(ScoutingReport, REPORTS, filters, order_by="scouting_date", descending=True)


def unlinked_reports(repo: Repository) -> List[ScoutingReport]:
    return [r for r in list_reports(repo) if r.linked_player_id is None]


def save_report(
    repo: Repository,
    data: Dict[str, Any],
    report_id: Optional[str] = None,
    player_id: Optional[str] = None,
) -> ScoutingReport:
    """Create (linked to ``player_id`` when given) or update a scouting report.

    ``data`` carries ``scouting_month``/``scouting_year`` instead of a date.
    """
    require_fields({**current_row(repo, REPORTS, report_id), **data}, ["player_name"])
    payload = {k: (data[k] if data[k] != "" else None) for k in REPORT_FIELDS if k in data}
    if "scouting_month" in data or "scouting_year" in data or not report_id:
        payload["scouting_date"] = scouting_date(data.get("scouting_month"), data.get("scouting_year"))
    if "skill_evaluations" in payload and payload["skill_evaluations"] is None:
        payload["skill_evaluations"] = {}
    if not report_id:
        payload["status"] = ReportStatus.PENDING.value
        payload["linked_player_id"] = player_id
    report = save_row(repo, ScoutingReport, REPORTS, payload, report_id)
    logger.info(f"Scouting report on {report.player_name} {'updated' if report_id else 'created'}")
    return report


def link_report(repo: Repository, report_id: str, player_id: Optional[str]) -> ScoutingReport:
    """Attach a report to a player profile; ``None`` unlinks it."""
    return ScoutingReport.model_validate(repo.update(REPORTS, report_id, {"linked_player_id": player_id}))


def set_report_status(repo: Repository, report_id: str, status: str) -> ScoutingReport:
    return ScoutingReport.model_validate(repo.update(REPORTS, report_id, {"status": ReportStatus(status).value}))


def delete_report(repo: Repository, report_id: str) -> None:
    repo.delete(REPORTS, report_id)


# -- performance reports -------------------------------------------------

def per90(value: Optional[float], minutes: Optional[float]) -> Optional[float]:
    if value is None or not minutes or minutes <= 0:
        return None
    return round(value / minutes * 90, 3)


def r90_score(actions: List[Dict[str, Any]], minutes: int) -> float:
    """Summed action score scaled to 90 minutes; unscored actions count as 0."""
    if not minutes or minutes <= 0:
        raise ValueError("Minutes played must be greater than zero")
    raw = sum(float(a.get("action_score") or 0) for a in actions)
    return raw / minutes * 90


def fixture_key(match_date: str, opponent: str) -> str:
    """Identifier for a fixture entered by hand: date plus opponent slug."""
    return f"{match_date}-{slugify(opponent or 'unknown')}"


def _clean_stats(stats: Optional[Dict[str, Any]]) -> Optional[Dict[str, float]]:
    cleaned = {k: float(v) for k, v in (stats or {}).items() if v not in (None, "")}
    return cleaned or None


def _clean_actions(actions: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    rows = []
    for i, a in enumerate(actions, start=1):
        rows.append({
            "action_number": int(a.get("action_number") or i),
            "minute": float(a["minute"]) if a.get("minute") not in (None, "") else None,
            "action_score": float(a["action_score"]) if a.get("action_score") not in (None, "") else None,
            "action_type": a.get("action_type") or None,
            "action_description": a.get("action_description") or None,
            "notes": a.get("notes") or None,
        })
    return rows


def save_performance_report(
    repo: Repository,
    player_id: str,
    data: Dict[str, Any],
    actions: List[Dict[str, Any]],
    report_id: Optional[str] = None,
) -> PerformanceReport:
    """Create or replace a fixture analysis together with its actions.

    Editing rewrites the action list; a second report for the same player
    and fixture is refused.
    """
    if not data.get("fixture_id"):
        raise ValueError("Please select a fixture")
    if not data.get("minutes_played"):
        raise ValueError("Please fill in Minutes Played")
    if not actions or actions[0].get("minute") in (None, ""):
        raise ValueError("Please add at least one performance action")
    minutes = int(data["minutes_played"])
    action_rows = _clean_actions(actions)
    payload = {
        "player_id": player_id,
        "fixture_id": data["fixture_id"],
        "analysis_date": data.get("analysis_date") or None,
        "opponent": data.get("opponent") or None,
        "result": data.get("result") or None,
        "minutes_played": minutes,
        "r90_score": r90_score(action_rows, minutes),
        "striker_stats": _clean_stats(data.get("striker_stats")),
    }
    if report_id:
        report = save_row(repo, PerformanceReport, ANALYSES, payload, report_id)
        for a in repo.select(ACTIONS, {"analysis_id": report_id}):
            repo.delete(ACTIONS, a["id"])
    else:
        if repo.select(ANALYSES, {"player_id": player_id, "fixture_id": data["fixture_id"]}):
            raise ValueError("A performance report already exists for this fixture. Edit the existing report instead.")
        report = save_row(repo, PerformanceReport, ANALYSES, payload)
    for row in action_rows:
        save_row(repo, PerformanceAction, ACTIONS, {**row, "analysis_id": report.id})
    logger.info(f"Performance report {report.id} saved: R90 {report.r90_score:.2f} over {minutes}'")
    return report


def list_performance_reports(repo: Repository, player_id: str) -> List[PerformanceReport]:
    return repo.fetch(PerformanceReport, ANALYSES, {"player_id": player_id}, order_by="analysis_date", descending=True)


def report_actions(repo: Repository, report_id: str) -> List[PerformanceAction]:
    return repo.fetch(PerformanceAction, ACTIONS, {"analysis_id": report_id}, order_by="action_number")


def delete_performance_report(repo: Repository, report_id: str) -> None:
    for a in repo.select(ACTIONS, {"analysis_id": report_id}):
        repo.delete(ACTIONS, a["id"])
    repo.delete(ANALYSES, report_id)
