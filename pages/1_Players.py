import streamlit as st

from components.banners import page_banner
from components.cards import player_card, scouting_report_card
from services.monitoring import capture_exception, init_monitoring
from services.portal import list_players
from services.repository import Repository
from services.scouting import list_reports

st.set_page_config(page_title="Players", page_icon="⚽", layout="wide")
init_monitoring()

st.title("⚽ Our Players")
repo = Repository()

try:
    players = list_players(repo)
except Exception as e:
    capture_exception(e, {"page": "players"})
    st.error(f"Failed to load players: {e}")
    st.stop()

page_banner("Represented players", f"{len(players)} profiles")

if not players:
    st.info("No player profiles published yet.")
    st.stop()

positions = sorted({p.position for p in players if p.position})
pos = st.sidebar.selectbox("Position", options=["all"] + positions, format_func=lambda x: "All positions" if x == "all" else x)
shown = [p for p in players if pos == "all" or p.position == pos]

cols = st.columns(2)
for i, p in enumerate(shown):
    with cols[i % 2]:
        player_card(p)
        try:
            reports = list_reports(repo, p.id)
        except Exception as e:
            capture_exception(e, {"page": "players", "player_id": p.id})
            reports = []
        if reports:
            with st.expander(f"Scouting reports ({len(reports)})"):
                for r in reports:
                    scouting_report_card(r)
