import streamlit as st

from components.cards import job_card
from services.monitoring import capture_exception, init_monitoring
from services.portal import list_jobs
from services.repository import Repository

st.set_page_config(page_title="Jobs", page_icon="💼")
init_monitoring()

st.title("💼 Open Positions")

repo = Repository()
try:
    jobs = list_jobs(repo, active_only=True)
except Exception as e:
    capture_exception(e, {"page": "jobs"})
    st.error(f"Failed to load jobs: {e}")
    st.stop()

if not jobs:
    st.info("There are no open positions right now. Check back soon.")
    st.stop()

departments = sorted({j.department for j in jobs})
dept = st.selectbox("Department", options=["all"] + departments, format_func=lambda d: "All departments" if d == "all" else d)
for job in jobs:
    if dept == "all" or job.department == dept:
        job_card(job)
