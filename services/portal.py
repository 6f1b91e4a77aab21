"""
Staff portal and public page data access: players, invoices, jobs, partners,
goals, tasks and translations.

Each function is a passthrough to the repository with the same ad hoc form
validation the staff forms do before submitting.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel

from domain.models import (
    Goal, Invoice, InvoiceStatus, Job, Partner, Player, Task, Translation, LANGUAGES,
)
from domain.validators import require_fields, validate_row

from .monitoring import get_logger
from .repository import Repository, new_id, now_iso

T = TypeVar("T", bound=BaseModel)

logger = get_logger(__name__)

PLAYERS = "players"
INVOICES = "invoices"
JOBS = "jobs"
PARTNERS = "partners"
GOALS = "staff_goals"
TASKS = "staff_tasks"
TRANSLATIONS = "translations"


def current_row(repo: Repository, table: str, row_id: Optional[str]) -> Dict[str, Any]:
    """Stored row for an update, or an empty dict for an insert."""
    return repo.get(table, row_id) if row_id else {}


def save_row(repo: Repository, model: Type[T], table: str, data: Dict[str, Any], row_id: Optional[str] = None) -> T:
    """Validate then insert (no id) or update (id given).

    An update validates the stored row merged with ``data`` but only writes
    the keys the caller supplied; other columns keep their stored values.
    """
    if row_id:
        stored = repo.get(table, row_id)
        merged = validate_row(model, {**stored, **data, "id": row_id}).model_dump(mode="json")
        changes = {k: merged[k] for k in data if k in merged and k != "id"}
        # Never blank the creation stamp
        if changes.get("created_at", "") is None:
            changes.pop("created_at")
        return model.model_validate(repo.update(table, row_id, changes))
    row = validate_row(model, {**data, "id": new_id()}).model_dump(mode="json")
    # Leave the creation stamp to the repository
    if row.get("created_at") is None:
        row.pop("created_at", None)
    return model.model_validate(repo.insert(table, row))


def current_quarter(today: Optional[date] = None) -> str:
    d = today or date.today()
    return f"Q{(d.month - 1) // 3 + 1}"


# -- players -------------------------------------------------------------

def list_players(repo: Repository, visible_only: bool = True) -> List[Player]:
    filters = {"is_visible": True} if visible_only else None
    return repo.fetch(Player, PLAYERS, filters, order_by="name")


def get_player(repo: Repository, player_id: str) -> Player:
    return repo.fetch_one(Player, PLAYERS, player_id)


def save_player(repo: Repository, data: Dict[str, Any], player_id: Optional[str] = None) -> Player:
    require_fields({**current_row(repo, PLAYERS, player_id), **data}, ["name"])
    return save_row(repo, Player, PLAYERS, data, player_id)


# -- invoices ------------------------------------------------------------

def list_invoices(repo: Repository, player_id: Optional[str] = None, status: Optional[str] = None) -> List[Invoice]:
    filters: Dict[str, Any] = {}
    if player_id and player_id != "all":
        filters["player_id"] = player_id
    if status and status != "all":
        filters["status"] = InvoiceStatus(status).value
    return repo.fetch(Invoice, INVOICES, filters, order_by="invoice_date", descending=True)


def save_invoice(repo: Repository, data: Dict[str, Any], invoice_id: Optional[str] = None) -> Invoice:
    current = current_row(repo, INVOICES, invoice_id)
    merged = {**current, **data}
    require_fields(merged, ["player_id", "invoice_number", "invoice_date", "due_date", "amount"])
    try:
        amount = float(merged["amount"])
    except (TypeError, ValueError):
        raise ValueError("Amount must be a number")
    if amount <= 0:
        raise ValueError("Amount must be greater than zero")
    payload = dict(data)
    if "amount" in data:
        payload["amount"] = amount
    for key in ("description", "pdf_url"):
        if key in data:
            payload[key] = data[key] or None
    if not invoice_id:
        payload.setdefault("currency", repo.load_policies().defaultCurrency)
    invoice = validate_row(Invoice, {**current, **payload, "id": invoice_id or "new"})
    if invoice.due_date < invoice.invoice_date:
        raise ValueError("Due date cannot be before the invoice date")
    saved = save_row(repo, Invoice, INVOICES, payload, invoice_id)
    logger.info(f"Invoice {saved.invoice_number} {'updated' if invoice_id else 'created'}")
    return saved


def delete_invoice(repo: Repository, invoice_id: str) -> None:
    repo.delete(INVOICES, invoice_id)


def mark_overdue(repo: Repository, today: Optional[date] = None) -> int:
    """Flag pending invoices past their due date; returns how many changed."""
    d = today or date.today()
    changed = 0
    for inv in list_invoices(repo, status=InvoiceStatus.PENDING.value):
        if inv.due_date < d:
            repo.update(INVOICES, inv.id, {"status": InvoiceStatus.OVERDUE.value})
            changed += 1
    return changed


def invoice_totals(invoices: List[Invoice]) -> Dict[str, Dict[str, float]]:
    """Sum of amounts per currency and status."""
    totals: Dict[str, Dict[str, float]] = {}
    for inv in invoices:
        per_status = totals.setdefault(inv.currency, {})
        per_status[inv.status.value] = round(per_status.get(inv.status.value, 0.0) + inv.amount, 2)
    return totals


# -- jobs ----------------------------------------------------------------

def list_jobs(repo: Repository, active_only: bool = False) -> List[Job]:
    filters = {"is_active": True} if active_only else None
    return repo.fetch(Job, JOBS, filters, order_by="created_at", descending=True)


def save_job(repo: Repository, data: Dict[str, Any], job_id: Optional[str] = None) -> Job:
    require_fields({**current_row(repo, JOBS, job_id), **data}, ["title", "department"])
    payload = {**data}
    if not job_id:
        payload.setdefault("created_at", now_iso())
    return save_row(repo, Job, JOBS, payload, job_id)


def set_job_active(repo: Repository, job_id: str, active: bool) -> None:
    repo.update(JOBS, job_id, {"is_active": active})


# -- partners ------------------------------------------------------------

def list_partners(repo: Repository, category: Optional[str] = None) -> List[Partner]:
    filters = {"category": category} if category and category != "all" else None
    return repo.fetch(Partner, PARTNERS, filters, order_by="display_order")


def save_partner(repo: Repository, data: Dict[str, Any], partner_id: Optional[str] = None) -> Partner:
    require_fields({**current_row(repo, PARTNERS, partner_id), **data}, ["name", "category"])
    payload = {**data, "updated_at": now_iso()}
    if not partner_id:
        payload.setdefault("display_order", len(repo.select(PARTNERS)))
        payload.setdefault("created_at", now_iso())
    return save_row(repo, Partner, PARTNERS, payload, partner_id)


def delete_partner(repo: Repository, partner_id: str) -> None:
    repo.delete(PARTNERS, partner_id)


# -- goals & tasks -------------------------------------------------------

def list_goals(repo: Repository, quarter: Optional[str] = None, year: Optional[int] = None) -> List[Goal]:
    filters: Dict[str, Any] = {}
    if quarter:
        filters["quarter"] = quarter
    if year:
        filters["year"] = year
    return repo.fetch(Goal, GOALS, filters or None, order_by="display_order")


def save_goal(repo: Repository, data: Dict[str, Any], goal_id: Optional[str] = None) -> Goal:
    require_fields({**current_row(repo, GOALS, goal_id), **data}, ["title", "target_value", "unit"])
    payload = {**data}
    for key in ("target_value", "current_value"):
        if key in data:
            payload[key] = float(data[key] or 0)
    if not goal_id:
        payload.setdefault("current_value", 0.0)
        payload["quarter"] = data.get("quarter") or current_quarter()
        payload["year"] = int(data.get("year") or datetime.now().year)
        payload.setdefault("display_order", len(repo.select(GOALS)))
    return save_row(repo, Goal, GOALS, payload, goal_id)


def delete_goal(repo: Repository, goal_id: str) -> None:
    repo.delete(GOALS, goal_id)


def list_tasks(repo: Repository) -> List[Task]:
    return repo.fetch(Task, TASKS, order_by="display_order")


def add_task(repo: Repository, title: str, priority: str = "medium", category: Optional[str] = None) -> Task:
    if not title or not title.strip():
        raise ValueError("Task title is required")
    return save_row(repo, Task, TASKS, {
        "title": title.strip(),
        "priority": priority,
        "category": category or None,
        "display_order": len(repo.select(TASKS)),
    })


def toggle_task(repo: Repository, task_id: str) -> Task:
    task = repo.fetch_one(Task, TASKS, task_id)
    row = repo.update(TASKS, task_id, {"completed": not task.completed})
    return Task.model_validate(row)


def delete_task(repo: Repository, task_id: str) -> None:
    repo.delete(TASKS, task_id)


# -- translations --------------------------------------------------------

def list_translations(repo: Repository, page_name: Optional[str] = None) -> List[Translation]:
    filters = {"page_name": page_name} if page_name and page_name != "all" else None
    return repo.fetch(Translation, TRANSLATIONS, filters, order_by="text_key")


def upsert_translation(repo: Repository, data: Dict[str, Any]) -> Translation:
    """Insert or update the entry identified by (page_name, text_key)."""
    require_fields(data, ["page_name", "text_key", "english"])
    # Languages left out of data keep their stored text
    payload = {k: (data[k] or None) for k in LANGUAGES if k in data}
    payload.update(page_name=data["page_name"].strip(), text_key=data["text_key"].strip(), english=data["english"])
    existing = repo.select(TRANSLATIONS, {"page_name": payload["page_name"], "text_key": payload["text_key"]})
    row_id = existing[0]["id"] if existing else None
    return save_row(repo, Translation, TRANSLATIONS, payload, row_id)


def missing_languages(t: Translation) -> List[str]:
    return [lang for lang in LANGUAGES if not getattr(t, lang)]
