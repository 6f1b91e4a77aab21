import streamlit as st

st.set_page_config(page_title="About", page_icon="ℹ️")

st.title("ℹ️ About the Agency")

st.markdown(
    """
We are a football representation agency working with players, clubs and
partners across Europe.

- **Players**: public profiles with scouting metrics.
- **Jobs**: current openings at the agency.
- **Scouting network**: our club map, calibrated against real-world coordinates.

Staff tools (invoices, goals, partners, translations, contracts, map
calibration and the tactics board) are available from the sidebar.
    """
)
