from datetime import date, timedelta

import streamlit as st

from components.banners import notify_success, report_failure
from components.controls import invoice_filters
from components.tables import invoices_table
from domain.models import InvoiceStatus
from services.monitoring import init_monitoring
from services.portal import (
    delete_invoice, invoice_totals, list_invoices, list_players, mark_overdue, save_invoice,
)
from services.repository import Repository

st.set_page_config(page_title="Invoices", page_icon="🧾", layout="wide")
init_monitoring()

st.title("🧾 Invoices")
repo = Repository()

try:
    players = list_players(repo, visible_only=False)
except Exception as e:
    report_failure("Loading players", e)
    st.stop()

player_id, status = invoice_filters(players)

if st.sidebar.button("Flag overdue", help="Mark pending invoices past their due date as overdue."):
    try:
        n = mark_overdue(repo)
        notify_success(f"{n} invoice(s) marked overdue")
    except Exception as e:
        report_failure("Flagging overdue invoices", e)

try:
    invoices = list_invoices(repo, player_id, status)
except Exception as e:
    report_failure("Loading invoices", e)
    st.stop()

totals = invoice_totals(invoices)
if totals:
    cols = st.columns(len(totals))
    for col, (currency, per_status) in zip(cols, totals.items()):
        col.metric(f"Outstanding ({currency})", f"{per_status.get('pending', 0.0) + per_status.get('overdue', 0.0):,.2f}")

invoices_table(invoices, players)

st.divider()
names = {p.id: p.name for p in players}
editing = st.selectbox(
    "Edit invoice",
    options=[None] + [inv.id for inv in invoices],
    format_func=lambda i: "New invoice" if i is None else next(inv.invoice_number for inv in invoices if inv.id == i),
)
current = next((inv for inv in invoices if inv.id == editing), None)

with st.form("invoice_form", clear_on_submit=current is None):
    st.subheader("Edit invoice" if current else "New invoice")
    c1, c2 = st.columns(2)
    with c1:
        form_player = st.selectbox(
            "Player",
            options=[p.id for p in players],
            format_func=lambda pid: names.get(pid, pid),
            index=[p.id for p in players].index(current.player_id) if current and current.player_id in names else 0,
        ) if players else None
        number = st.text_input("Invoice number", value=current.invoice_number if current else "")
        amount = st.number_input("Amount", min_value=0.0, step=50.0, value=float(current.amount) if current else 0.0)
        currency = st.text_input("Currency", value=current.currency if current else repo.load_policies().defaultCurrency)
    with c2:
        invoice_date = st.date_input("Invoice date", value=current.invoice_date if current else date.today())
        due_date = st.date_input("Due date", value=current.due_date if current else date.today() + timedelta(days=30))
        form_status = st.selectbox(
            "Status",
            options=list(InvoiceStatus),
            format_func=lambda s: s.value.capitalize(),
            index=list(InvoiceStatus).index(current.status) if current else 0,
        )
        pdf_url = st.text_input("PDF link", value=(current.pdf_url or "") if current else "")
    description = st.text_area("Description", value=(current.description or "") if current else "")
    submitted = st.form_submit_button("Save")

if submitted:
    try:
        saved = save_invoice(repo, {
            "player_id": form_player,
            "invoice_number": number.strip(),
            "invoice_date": invoice_date.isoformat(),
            "due_date": due_date.isoformat(),
            "amount": amount,
            "currency": currency.strip().upper(),
            "status": form_status.value,
            "description": description,
            "pdf_url": pdf_url,
        }, current.id if current else None)
    except Exception as e:
        report_failure("Saving invoice", e)
    else:
        notify_success(f"Invoice {saved.invoice_number} saved")
        st.rerun()

if current and st.button("Delete invoice", type="secondary"):
    try:
        delete_invoice(repo, current.id)
    except Exception as e:
        report_failure("Deleting invoice", e)
    else:
        notify_success("Invoice deleted")
        st.rerun()
