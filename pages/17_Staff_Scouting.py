from datetime import date

import streamlit as st

from components.banners import notify_success, report_failure
from components.cards import scouting_report_card
from domain.models import ReportStatus
from services.monitoring import init_monitoring
from services.portal import list_players
from services.repository import Repository
from services.scouting import (
    delete_report, link_report, list_reports, save_report, set_report_status, unlinked_reports,
)

st.set_page_config(page_title="Scouting", page_icon="🔍", layout="wide")
init_monitoring()

st.title("🔍 Scouting Reports")
repo = Repository()

try:
    players = list_players(repo, visible_only=False)
except Exception as e:
    report_failure("Loading players", e)
    st.stop()

names = {p.id: p.name for p in players}
player_id = st.sidebar.selectbox(
    "Player", [None] + list(names), format_func=lambda i: "All reports" if i is None else names[i],
)
status = st.sidebar.selectbox("Status", ["all"] + [s.value for s in ReportStatus], format_func=str.capitalize)

try:
    reports = list_reports(repo, player_id, status)
except Exception as e:
    report_failure("Loading scouting reports", e)
    st.stop()

if not reports:
    st.caption("No scouting reports yet.")

for r in reports:
    scouting_report_card(r)
    a1, a2, a3, a4 = st.columns(4)
    new_status = a1.selectbox("Status", list(ReportStatus), index=list(ReportStatus).index(r.status),
                              format_func=lambda s: s.value.capitalize(), key=f"status_{r.id}", label_visibility="collapsed")
    if new_status != r.status:
        try:
            set_report_status(repo, r.id, new_status.value)
        except Exception as e:
            report_failure("Updating status", e)
        else:
            st.rerun()
    if a2.button("Edit", key=f"edit_{r.id}"):
        st.session_state["editing_report"] = r.id
        st.rerun()
    if r.linked_player_id and a3.button("Unlink", key=f"unlink_{r.id}"):
        try:
            link_report(repo, r.id, None)
        except Exception as e:
            report_failure("Unlinking report", e)
        else:
            notify_success("Scouting report unlinked")
            st.rerun()
    if a4.button("Delete", key=f"del_{r.id}"):
        try:
            delete_report(repo, r.id)
        except Exception as e:
            report_failure("Deleting report", e)
        else:
            st.rerun()

if player_id:
    try:
        available = unlinked_reports(repo)
    except Exception as e:
        report_failure("Loading available reports", e)
        available = []
    if available:
        with st.expander(f"Link an existing report to {names[player_id]}"):
            choice = st.selectbox("Report", available, format_func=lambda r: f"{r.player_name} · {r.scouting_date:%b %Y}")
            if st.button("Link report"):
                try:
                    link_report(repo, choice.id, player_id)
                except Exception as e:
                    report_failure("Linking report", e)
                else:
                    notify_success("Scouting report linked successfully")
                    st.rerun()

st.divider()
current = next((r for r in reports if r.id == st.session_state.get("editing_report")), None)
when = current.scouting_date if current else date.today()
with st.form("report_form", clear_on_submit=current is None):
    st.subheader(f"Edit report on {current.player_name}" if current else "New scouting report")
    c1, c2, c3 = st.columns(3)
    default_name = current.player_name if current else names.get(player_id, "")
    player_name = c1.text_input("Player name", value=default_name)
    month = c2.selectbox("Month", list(range(1, 13)), index=when.month - 1, format_func=lambda m: date(2000, m, 1).strftime("%B"))
    year = c3.number_input("Year", min_value=2000, max_value=2100, value=when.year, step=1)
    d1, d2, d3 = st.columns(3)
    position = d1.text_input("Position", value=(current.position or "") if current else "")
    club = d2.text_input("Current club", value=(current.current_club or "") if current else "")
    nationality = d3.text_input("Nationality", value=(current.nationality or "") if current else "")
    e1, e2, e3 = st.columns(3)
    location = e1.text_input("Location", value=(current.location or "") if current else "")
    competition = e2.text_input("Competition", value=(current.competition or "") if current else "")
    scout = e3.text_input("Scout", value=(current.scout_name or "") if current else "")
    rating = st.number_input("Overall rating", min_value=0.0, max_value=10.0, step=0.5,
                             value=current.overall_rating if current else None, placeholder="Not rated")
    match_context = st.text_input("Match context", value=(current.match_context or "") if current else "")
    video = st.text_input("Video URL", value=(current.video_url or "") if current else "")
    summary = st.text_area("Summary", value=(current.summary or "") if current else "")
    recommendation = st.text_area("Recommendation", value=(current.recommendation or "") if current else "")
    submitted = st.form_submit_button("Save report")

if submitted:
    data = {
        "player_name": player_name,
        "scouting_month": month,
        "scouting_year": int(year),
        "position": position,
        "current_club": club,
        "nationality": nationality,
        "location": location,
        "competition": competition,
        "scout_name": scout,
        "overall_rating": rating,
        "match_context": match_context,
        "video_url": video,
        "summary": summary,
        "recommendation": recommendation,
    }
    try:
        save_report(repo, data, current.id if current else None, player_id=player_id)
    except Exception as e:
        report_failure("Saving scouting report", e)
    else:
        st.session_state.pop("editing_report", None)
        notify_success("Scouting report updated" if current else "Scouting report created")
        st.rerun()
