"""
Agency Portal entry point: page config, monitoring and the landing page.
Pages live in pages/; logic in domain/ and services/.
"""

import streamlit as st

from services.monitoring import init_monitoring
from services.portal import list_jobs, list_players
from services.repository import Repository

st.set_page_config(page_title="Agency Portal", page_icon="⚽", layout="wide")
init_monitoring()

# Classes used by components.cards and components.banners
st.markdown("""
<style>
    .profile-card { border: 1px solid #e0e0e0; border-radius: 8px; padding: 1rem; margin: 1rem 0; }
    .context-banner { background-color: #e8f4f8; border-left: 4px solid #1f77b4; padding: 0.5rem 1rem; border-radius: 4px; }
</style>
""", unsafe_allow_html=True)


def main():
    st.title("⚽ Agency Portal")
    repo = Repository()
    try:
        players = list_players(repo)
        jobs = list_jobs(repo, active_only=True)
    except Exception as e:
        st.error(f"Failed to load portal data: {e}")
        return
    c1, c2 = st.columns(2)
    c1.metric("Represented players", len(players))
    c2.metric("Open positions", len(jobs))
    st.caption("Public: Players, Jobs, Sign Contract. Staff tools are listed under the Staff pages in the sidebar.")


if __name__ == "__main__":
    main()
