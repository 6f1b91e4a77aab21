from datetime import date

import streamlit as st

from components.banners import notify_success, report_failure
from services.monitoring import init_monitoring
from services.portal import list_players
from services.repository import Repository
from services.scouting import (
    delete_performance_report, fixture_key, list_performance_reports, per90, r90_score,
    report_actions, save_performance_report,
)

st.set_page_config(page_title="Performance Reports", page_icon="📈", layout="wide")
init_monitoring()

st.title("📈 Performance Reports")
repo = Repository()

STRIKER_STATS = [
    "xGChain", "xG_adj", "xA_adj", "movement_in_behind_xC", "movement_down_side_xC",
    "triple_threat_xC", "movement_to_feet_xC", "crossing_movement_xC",
    "interceptions", "regains_adj", "turnovers_adj", "progressive_passes_adj",
]
ACTION_COLUMNS = ["minute", "action_score", "action_type", "action_description", "notes"]

try:
    players = list_players(repo, visible_only=False)
except Exception as e:
    report_failure("Loading players", e)
    st.stop()
if not players:
    st.info("Add a player first.")
    st.stop()

player = st.sidebar.selectbox("Player", players, format_func=lambda p: p.name)

try:
    reports = list_performance_reports(repo, player.id)
except Exception as e:
    report_failure("Loading performance reports", e)
    st.stop()

for r in reports:
    heading = f"{r.analysis_date or '—'} vs {r.opponent or '?'}"
    if r.r90_score is not None:
        heading += f" · R90 {r.r90_score:.2f}"
    with st.expander(heading):
        st.caption(f"{r.minutes_played}' played" + (f" · {r.result}" if r.result else ""))
        st.dataframe([a.model_dump(include=set(ACTION_COLUMNS) | {"action_number"}) for a in report_actions(repo, r.id)],
                     hide_index=True, use_container_width=True)
        if r.striker_stats:
            st.json(r.striker_stats)
        if st.button("Edit", key=f"edit_{r.id}"):
            st.session_state["editing_analysis"] = r.id
            st.rerun()
        if st.button("Delete report", key=f"del_{r.id}"):
            try:
                delete_performance_report(repo, r.id)
            except Exception as e:
                report_failure("Deleting performance report", e)
            else:
                notify_success("Performance report deleted successfully")
                st.rerun()

st.divider()
current = next((r for r in reports if r.id == st.session_state.get("editing_analysis")), None)
st.subheader("Edit performance report" if current else "New performance report")

f1, f2, f3, f4 = st.columns(4)
match_date = f1.date_input("Match date", value=current.analysis_date if current and current.analysis_date else date.today())
opponent = f2.text_input("Opponent", value=(current.opponent or "") if current else "")
result = f3.text_input("Result", value=(current.result or "") if current else "", placeholder="W 2-1")
minutes = f4.number_input("Minutes played", min_value=0, max_value=130, step=1,
                          value=current.minutes_played if current else 0)

if current:
    rows = [a.model_dump(include=set(ACTION_COLUMNS)) for a in report_actions(repo, current.id)]
else:
    rows = [dict.fromkeys(ACTION_COLUMNS)]
actions = st.data_editor(rows, num_rows="dynamic", use_container_width=True, key=f"actions_{current.id if current else 'new'}")

if minutes:
    try:
        st.metric("R90 (live)", f"{r90_score(actions, int(minutes)):.2f}")
    except ValueError:
        st.caption("Action scores must be numbers.")

with st.expander("Striker stats"):
    stored = (current.striker_stats or {}) if current else {}
    stats = {}
    cols = st.columns(3)
    for i, name in enumerate(STRIKER_STATS):
        value = cols[i % 3].number_input(name, value=stored.get(name), format="%.3f", placeholder="—", key=f"stat_{name}")
        stats[name] = value
        if value is not None and minutes:
            stats[f"{name}_per90"] = per90(value, minutes)

if st.button("Save performance report", type="primary"):
    data = {
        # Fixtures are not tracked here; keep an edited report on its fixture
        "fixture_id": current.fixture_id if current else fixture_key(match_date.isoformat(), opponent),
        "analysis_date": match_date.isoformat(),
        "opponent": opponent,
        "result": result,
        "minutes_played": minutes,
        "striker_stats": stats,
    }
    try:
        save_performance_report(repo, player.id, data, actions, current.id if current else None)
    except Exception as e:
        report_failure("Saving performance report", e)
    else:
        st.session_state.pop("editing_analysis", None)
        notify_success(f"Performance report {'updated' if current else 'created'} successfully")
        st.rerun()
