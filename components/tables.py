"""
Tables component for staff list views.
"""
from __future__ import annotations

from typing import Dict, List

import streamlit as st

from domain.models import Invoice, Player


def invoices_table(invoices: List[Invoice], players: List[Player]) -> None:
    names: Dict[str, str] = {p.id: p.name for p in players}
    rows = [
        {
            "Number": inv.invoice_number,
            "Player": names.get(inv.player_id, "Unknown"),
            "Date": inv.invoice_date.isoformat(),
            "Due": inv.due_date.isoformat(),
            "Amount": f"{inv.amount:,.2f} {inv.currency}",
            "Status": inv.status.value,
        }
        for inv in invoices
    ]
    st.dataframe(rows, use_container_width=True, hide_index=True)
