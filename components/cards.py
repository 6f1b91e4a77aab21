"""
Card components for players, jobs, partners, goals and scouting reports.
"""
from __future__ import annotations

import streamlit as st

from domain.formatting import format_ig_handle, format_score_with_frequency, format_stat_value
from domain.models import Goal, Job, Partner, Player, ReportStatus, ScoutingReport


def player_card(p: Player) -> None:
    st.markdown("<div class='profile-card'>", unsafe_allow_html=True)
    st.subheader(p.name)
    meta = [x for x in (p.position, p.club, p.nationality) if x]
    if p.age is not None:
        meta.append(f"{p.age} yrs")
    if meta:
        st.caption(" • ".join(meta))
    c1, c2 = st.columns(2)
    with c1:
        st.metric("R90", format_stat_value(p.r90_score) if p.r90_score is not None else "—")
    with c2:
        if p.performance_action_score is not None:
            st.metric("Action score", format_score_with_frequency(p.performance_action_score))
        else:
            st.metric("Action score", "—")
    if p.bio:
        st.write(p.bio)
    handle = format_ig_handle(p.instagram_handle)
    if handle:
        st.markdown(f"[@{handle}](https://instagram.com/{handle})")
    st.markdown("</div>", unsafe_allow_html=True)


def job_card(job: Job) -> None:
    with st.container(border=True):
        title = job.title if job.is_active else f"{job.title} (Inactive)"
        st.subheader(title)
        meta = [job.department] + [x for x in (job.location, job.type) if x]
        st.caption(" • ".join(meta))
        if job.description:
            st.write(job.description)


def partner_card(partner: Partner) -> None:
    with st.container(border=True):
        c1, c2 = st.columns([1, 4])
        with c1:
            if partner.logo_url:
                st.image(partner.logo_url, width=80)
        with c2:
            st.subheader(partner.name)
            st.caption(partner.category)
            if partner.description:
                st.write(partner.description)
            if partner.website_url:
                st.markdown(f"[Website]({partner.website_url})")
        if partner.case_study_title:
            with st.expander(partner.case_study_title):
                if partner.case_study_image_url:
                    st.image(partner.case_study_image_url)
                st.write(partner.case_study_content or "")


def goal_card(goal: Goal) -> None:
    st.markdown(f"**{goal.title}** · {goal.quarter} {goal.year}")
    st.progress(goal.progress_pct / 100.0, text=f"{format_stat_value(goal.current_value)} / {format_stat_value(goal.target_value)} {goal.unit} ({goal.progress_pct}%)")


_STATUS_ICONS = {ReportStatus.APPROVED: "🟢", ReportStatus.PENDING: "🟡", ReportStatus.REJECTED: "🔴"}


def scouting_report_card(r: ScoutingReport) -> None:
    with st.container(border=True):
        st.markdown(f"{_STATUS_ICONS[r.status]} **{r.player_name}** · {r.scouting_date:%B %Y}")
        meta = [x for x in (r.position, r.current_club, r.competition, r.scout_name and f"by {r.scout_name}") if x]
        if meta:
            st.caption(" • ".join(meta))
        if r.overall_rating is not None:
            st.metric("Overall rating", format_stat_value(r.overall_rating))
        if r.summary:
            st.write(r.summary)
        if r.recommendation:
            st.info(r.recommendation)
        if r.video_url:
            st.markdown(f"[Video]({r.video_url})")
