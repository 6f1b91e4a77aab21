import streamlit as st

from components.banners import notify_success, report_failure
from components.cards import job_card
from services.monitoring import init_monitoring
from services.portal import list_jobs, save_job, set_job_active
from services.repository import Repository

st.set_page_config(page_title="Manage Jobs", page_icon="💼", layout="wide")
init_monitoring()

st.title("💼 Job Listings")
repo = Repository()

JOB_TYPES = ["Full-time", "Part-time", "Contract", "Internship"]

try:
    jobs = list_jobs(repo)
except Exception as e:
    report_failure("Loading jobs", e)
    st.stop()

st.caption(f"{sum(1 for j in jobs if j.is_active)} active of {len(jobs)}")

editing = st.sidebar.selectbox(
    "Edit job",
    options=[None] + [j.id for j in jobs],
    format_func=lambda i: "New job" if i is None else next(j.title for j in jobs if j.id == i),
)
current = next((j for j in jobs if j.id == editing), None)

for job in jobs:
    job_card(job)
    label = "Deactivate" if job.is_active else "Activate"
    if st.button(label, key=f"active_{job.id}"):
        try:
            set_job_active(repo, job.id, not job.is_active)
        except Exception as e:
            report_failure(f"{label} job", e)
        else:
            st.rerun()

st.divider()
with st.form("job_form", clear_on_submit=current is None):
    st.subheader(f"Edit {current.title}" if current else "New job")
    c1, c2 = st.columns(2)
    title = c1.text_input("Title", value=current.title if current else "")
    department = c2.text_input("Department", value=current.department if current else "")
    location = c1.text_input("Location", value=(current.location or "") if current else "")
    job_type = c2.selectbox(
        "Type", JOB_TYPES,
        index=JOB_TYPES.index(current.type) if current and current.type in JOB_TYPES else 0,
    )
    description = st.text_area("Description", value=(current.description or "") if current else "")
    active = st.checkbox("Active", value=current.is_active if current else True)
    submitted = st.form_submit_button("Save")

if submitted:
    data = {
        "title": title,
        "department": department,
        "location": location or None,
        "type": job_type,
        "description": description or None,
        "is_active": active,
    }
    try:
        save_job(repo, data, current.id if current else None)
    except Exception as e:
        report_failure("Saving job", e)
    else:
        notify_success("Job saved")
        st.rerun()
