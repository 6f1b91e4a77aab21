import streamlit as st

from services.monitoring import init_monitoring
from services.notifications import recent_events
from services.repository import Repository

st.set_page_config(page_title="Notifications", page_icon="🔔")
init_monitoring()
st.title("🔔 Notifications")

repo = Repository()
event_type = st.sidebar.selectbox(
    "Type",
    options=[None, "contract_signed", "calibration_applied"],
    format_func=lambda t: "All events" if t is None else t.replace("_", " ").capitalize(),
)

try:
    events = recent_events(repo, limit=200, event_type=event_type)
except Exception as e:
    st.error(f"Failed to load notifications: {e}")
    st.stop()

if not events:
    st.info("No notifications yet.")
    st.stop()

st.caption(f"Showing {len(events)} events")
for ev in events:
    stamp = ev.created_at.strftime("%Y-%m-%d %H:%M") if ev.created_at else ""
    with st.expander(f"{stamp} • {ev.title}"):
        st.write(ev.body)
        if ev.event_data:
            st.json(ev.event_data)
