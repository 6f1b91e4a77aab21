"""
Transient notifications and the staff/public header banner.
"""
from __future__ import annotations

import streamlit as st

from services.monitoring import capture_exception


def page_banner(title: str, subtitle: str | None = None) -> None:
    st.markdown(
        f"<div class='context-banner'><strong>{title}</strong>{' • ' + subtitle if subtitle else ''}</div>",
        unsafe_allow_html=True,
    )


def notify_success(message: str) -> None:
    st.toast(message, icon="✅")


def notify_error(message: str) -> None:
    st.toast(message, icon="⚠️")
    st.error(message)


def report_failure(action: str, error: Exception, expected: tuple = (ValueError,)) -> None:
    """Show a failed operation to the user; unexpected errors are also logged."""
    if not isinstance(error, expected):
        capture_exception(error, {"action": action})
    notify_error(f"{action} failed: {error}")
