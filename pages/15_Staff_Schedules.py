from datetime import date

import streamlit as st

from components.banners import notify_success, report_failure
from domain.models import EventCategory
from services.monitoring import init_monitoring
from services.schedule import add_event, delete_event, events_for_day, list_events, week_days
from services.repository import Repository

st.set_page_config(page_title="Schedules", page_icon="📅", layout="wide")
init_monitoring()

st.title("📅 Staff Schedules")
repo = Repository()

WEEKDAYS = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

staff_id = st.sidebar.text_input("Staff member", value=st.session_state.get("staff_id", ""), placeholder="email or name")
if not staff_id.strip():
    st.info("Enter a staff member to see their schedule.")
    st.stop()
st.session_state["staff_id"] = staff_id = staff_id.strip()

offset = st.session_state.setdefault("week_offset", 0)
n1, n2, n3 = st.columns([1, 4, 1])
if n1.button("◀ Previous"):
    st.session_state["week_offset"] -= 1
    st.rerun()
if n3.button("Next ▶"):
    st.session_state["week_offset"] += 1
    st.rerun()
n2.markdown(f"**{'This week' if offset == 0 else f'{offset:+d} weeks'}**")

try:
    events = list_events(repo, staff_id)
except Exception as e:
    report_failure("Loading events", e)
    st.stop()

cols = st.columns(7)
for col, day in zip(cols, week_days(offset=offset)):
    with col:
        st.markdown(f"**{day:%a %d %b}**" + (" 🟢" if day == date.today() else ""))
        for ev in events_for_day(events, day):
            with st.container(border=True):
                times = " – ".join(t for t in (ev.start_time, ev.end_time) if t)
                st.markdown(f"{'🔄 ' if ev.is_ongoing else ''}**{ev.title}**")
                st.caption(" • ".join(x for x in (ev.category.value, times) if x))
                if ev.description:
                    st.write(ev.description)
                if st.button("Remove", key=f"del_{ev.id}_{day}"):
                    try:
                        delete_event(repo, ev.id)
                    except Exception as e:
                        report_failure("Removing event", e)
                    else:
                        notify_success("Event removed")
                        st.rerun()

st.divider()
with st.form("new_event", clear_on_submit=True):
    st.subheader("Add event")
    c1, c2 = st.columns(2)
    title = c1.text_input("Title")
    event_date = c2.date_input("Date", value=date.today())
    t1, t2, t3 = st.columns(3)
    start = t1.time_input("Start", value=None)
    end = t2.time_input("End", value=None)
    category = t3.selectbox("Category", list(EventCategory), format_func=lambda c: c.value.capitalize())
    description = st.text_area("Description")
    o1, o2 = st.columns(2)
    ongoing = o1.checkbox("Ongoing (repeats)")
    weekday = o2.selectbox("Repeats on", [None] + list(range(7)), format_func=lambda d: "Every day" if d is None else WEEKDAYS[d])
    submitted = st.form_submit_button("Add event")

if submitted:
    data = {
        "title": title,
        "event_date": event_date.isoformat(),
        "start_time": start.strftime("%H:%M") if start else None,
        "end_time": end.strftime("%H:%M") if end else None,
        "category": category.value,
        "description": description,
        "is_ongoing": ongoing,
        "day_of_week": weekday,
    }
    try:
        add_event(repo, staff_id, data)
    except Exception as e:
        report_failure("Adding event", e)
    else:
        notify_success("Event added")
        st.rerun()
