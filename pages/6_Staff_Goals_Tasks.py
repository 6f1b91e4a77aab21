from datetime import datetime

import streamlit as st

from components.banners import notify_success, report_failure
from components.cards import goal_card
from domain.models import TaskPriority
from services.monitoring import init_monitoring
from services.portal import (
    add_task, current_quarter, delete_goal, delete_task, list_goals, list_tasks, save_goal, toggle_task,
)
from services.repository import Repository

st.set_page_config(page_title="Goals & Tasks", page_icon="🎯", layout="wide")
init_monitoring()

st.title("🎯 Goals & Tasks")
repo = Repository()

quarters = ["Q1", "Q2", "Q3", "Q4"]
c1, c2 = st.sidebar.columns(2)
quarter = c1.selectbox("Quarter", quarters, index=quarters.index(current_quarter()))
year = c2.number_input("Year", min_value=2020, max_value=2100, value=datetime.now().year, step=1)

left, right = st.columns([3, 2])

with left:
    st.subheader(f"Goals · {quarter} {year}")
    try:
        goals = list_goals(repo, quarter, int(year))
    except Exception as e:
        report_failure("Loading goals", e)
        goals = []
    if not goals:
        st.caption("No goals set for this quarter.")
    for g in goals:
        goal_card(g)
        with st.expander("Update", expanded=False):
            with st.form(f"goal_{g.id}"):
                current_value = st.number_input("Current value", value=float(g.current_value), key=f"cur_{g.id}")
                target_value = st.number_input("Target", value=float(g.target_value), min_value=0.0, key=f"tgt_{g.id}")
                save = st.form_submit_button("Save")
            if save:
                try:
                    save_goal(repo, {**g.model_dump(exclude={"id"}), "current_value": current_value, "target_value": target_value}, g.id)
                except Exception as e:
                    report_failure("Updating goal", e)
                else:
                    st.rerun()
            if st.button("Delete goal", key=f"del_{g.id}"):
                try:
                    delete_goal(repo, g.id)
                except Exception as e:
                    report_failure("Deleting goal", e)
                else:
                    st.rerun()

    with st.form("new_goal", clear_on_submit=True):
        st.markdown("**New goal**")
        title = st.text_input("Title")
        g1, g2, g3 = st.columns(3)
        target = g1.number_input("Target", min_value=0.0, step=1.0)
        unit = g2.text_input("Unit", placeholder="signings")
        color = g3.selectbox("Colour", ["primary", "green", "blue", "orange", "red"])
        if st.form_submit_button("Add goal"):
            try:
                save_goal(repo, {"title": title, "target_value": target, "unit": unit, "color": color, "quarter": quarter, "year": int(year)})
            except Exception as e:
                report_failure("Adding goal", e)
            else:
                notify_success("Goal added")
                st.rerun()

with right:
    st.subheader("Tasks")
    with st.form("new_task", clear_on_submit=True):
        task_title = st.text_input("Task")
        t1, t2 = st.columns(2)
        priority = t1.selectbox("Priority", list(TaskPriority), index=1, format_func=lambda p: p.value.capitalize())
        category = t2.text_input("Category")
        if st.form_submit_button("Add task"):
            try:
                add_task(repo, task_title, priority.value, category)
            except Exception as e:
                report_failure("Adding task", e)
            else:
                st.rerun()

    try:
        tasks = list_tasks(repo)
    except Exception as e:
        report_failure("Loading tasks", e)
        tasks = []
    done = sum(1 for t in tasks if t.completed)
    if tasks:
        st.caption(f"{done}/{len(tasks)} completed")
    for t in tasks:
        r1, r2 = st.columns([6, 1])
        with r1:
            label = f"~~{t.title}~~" if t.completed else t.title
            if t.priority == TaskPriority.HIGH:
                label = f"🔴 {label}"
            checked = st.checkbox(label, value=t.completed, key=f"task_{t.id}")
            if checked != t.completed:
                try:
                    toggle_task(repo, t.id)
                except Exception as e:
                    report_failure("Updating task", e)
                else:
                    st.rerun()
        with r2:
            if st.button("🗑", key=f"deltask_{t.id}"):
                try:
                    delete_task(repo, t.id)
                except Exception as e:
                    report_failure("Deleting task", e)
                else:
                    st.rerun()
