"""
Sidebar controls for list filters and the tactics board toolbar.
Stateless: widgets keep their own keys, values are returned.
"""
from __future__ import annotations

from typing import List, Optional, Tuple

import streamlit as st

from domain.models import InvoiceStatus, ItemType, Player, Tool


def country_filter(countries: List[str], key: str = "country_filter") -> Optional[str]:
    """Returns None for the global view."""
    options = ["all"] + countries
    choice = st.sidebar.selectbox(
        "Country",
        options=options,
        format_func=lambda c: "All countries" if c == "all" else c,
        key=key,
    )
    return None if choice == "all" else choice


def invoice_filters(players: List[Player]) -> Tuple[str, str]:
    st.sidebar.header("Filters")
    player_id = st.sidebar.selectbox(
        "Player",
        options=["all"] + [p.id for p in players],
        format_func=lambda pid: "All players" if pid == "all" else next((p.name for p in players if p.id == pid), pid),
        key="invoice_player",
    )
    status = st.sidebar.selectbox(
        "Status",
        options=["all"] + [s.value for s in InvoiceStatus],
        format_func=lambda s: "All statuses" if s == "all" else s.capitalize(),
        key="invoice_status",
    )
    return player_id, status


def board_toolbar() -> Tuple[Tool, Optional[ItemType]]:
    """Tool picker plus the token to drop (None when no drop was requested)."""
    st.sidebar.header("Tools")
    tool = st.sidebar.radio(
        "Tool",
        options=list(Tool),
        format_func=lambda t: t.value.capitalize(),
        horizontal=True,
        key="board_tool",
    )
    st.sidebar.subheader("Add token")
    dropped = None
    c1, c2, c3 = st.sidebar.columns(3)
    if c1.button("⚽", use_container_width=True, key="add_football"):
        dropped = ItemType.FOOTBALL
    if c2.button("X", use_container_width=True, key="add_x"):
        dropped = ItemType.X
    if c3.button("O", use_container_width=True, key="add_o"):
        dropped = ItemType.O
    return tool, dropped
