import streamlit as st

from components.banners import notify_success, report_failure
from components.cards import partner_card
from services.monitoring import init_monitoring
from services.portal import delete_partner, list_partners, save_partner
from services.repository import Repository

st.set_page_config(page_title="Partners", page_icon="🤝", layout="wide")
init_monitoring()

st.title("🤝 Partners")
repo = Repository()

CATEGORIES = ["club", "brand", "media", "agency", "other"]
category = st.sidebar.selectbox("Category", ["all"] + CATEGORIES, format_func=lambda c: "All categories" if c == "all" else c.capitalize())

try:
    partners = list_partners(repo, category)
except Exception as e:
    report_failure("Loading partners", e)
    st.stop()

editing = st.sidebar.selectbox(
    "Edit partner",
    options=[None] + [p.id for p in partners],
    format_func=lambda i: "New partner" if i is None else next(p.name for p in partners if p.id == i),
)
current = next((p for p in partners if p.id == editing), None)

for p in partners:
    partner_card(p)

st.divider()
with st.form("partner_form", clear_on_submit=current is None):
    st.subheader(f"Edit {current.name}" if current else "New partner")
    c1, c2 = st.columns(2)
    name = c1.text_input("Name", value=current.name if current else "")
    cat = c2.selectbox("Category", CATEGORIES, index=CATEGORIES.index(current.category) if current and current.category in CATEGORIES else 0)
    website = c1.text_input("Website", value=(current.website_url or "") if current else "")
    logo = c2.text_input("Logo URL", value=(current.logo_url or "") if current else "")
    description = st.text_area("Description", value=(current.description or "") if current else "")
    with st.expander("Case study"):
        cs_title = st.text_input("Title", value=(current.case_study_title or "") if current else "")
        cs_content = st.text_area("Content", value=(current.case_study_content or "") if current else "")
        cs_image = st.text_input("Image URL", value=(current.case_study_image_url or "") if current else "")
    submitted = st.form_submit_button("Save")

if submitted:
    data = {
        "name": name,
        "category": cat,
        "website_url": website or None,
        "logo_url": logo or None,
        "description": description or None,
        "case_study_title": cs_title or None,
        "case_study_content": cs_content or None,
        "case_study_image_url": cs_image or None,
    }
    try:
        save_partner(repo, data, current.id if current else None)
    except Exception as e:
        report_failure("Saving partner", e)
    else:
        notify_success("Partner saved")
        st.rerun()

if current and st.button("Delete partner"):
    try:
        delete_partner(repo, current.id)
    except Exception as e:
        report_failure("Deleting partner", e)
    else:
        st.rerun()
