import streamlit as st

from components.banners import notify_success, report_failure
from domain.models import LANGUAGES
from services.monitoring import init_monitoring
from services.portal import list_translations, missing_languages, upsert_translation
from services.repository import Repository

st.set_page_config(page_title="Translations", page_icon="🌍", layout="wide")
init_monitoring()

st.title("🌍 Translations")
repo = Repository()

try:
    everything = list_translations(repo)
except Exception as e:
    report_failure("Loading translations", e)
    st.stop()

pages = sorted({t.page_name for t in everything})
page = st.sidebar.selectbox("Page", ["all"] + pages, format_func=lambda p: "All pages" if p == "all" else p)
only_missing = st.sidebar.checkbox("Only entries with missing languages")

rows = [t for t in everything if page == "all" or t.page_name == page]
if only_missing:
    rows = [t for t in rows if missing_languages(t)]

st.caption(f"{len(rows)} entries")
for t in rows:
    missing = missing_languages(t)
    header = f"{t.page_name} · {t.text_key}" + (f" · missing {len(missing)}" if missing else " · complete")
    with st.expander(header):
        with st.form(f"tr_{t.id}"):
            values = {}
            cols = st.columns(2)
            for i, lang in enumerate(LANGUAGES):
                values[lang] = cols[i % 2].text_area(lang.capitalize(), value=getattr(t, lang) or "", key=f"{t.id}_{lang}", height=80)
            if st.form_submit_button("Save"):
                try:
                    upsert_translation(repo, {"page_name": t.page_name, "text_key": t.text_key, **values})
                except Exception as e:
                    report_failure("Saving translation", e)
                else:
                    notify_success("Translation saved")
                    st.rerun()

st.divider()
with st.form("new_translation", clear_on_submit=True):
    st.subheader("Add or replace entry")
    c1, c2 = st.columns(2)
    page_name = c1.text_input("Page", value="" if page == "all" else page)
    text_key = c2.text_input("Text key")
    english = st.text_area("English")
    if st.form_submit_button("Save entry"):
        try:
            upsert_translation(repo, {"page_name": page_name, "text_key": text_key, "english": english})
        except Exception as e:
            report_failure("Saving translation", e)
        else:
            notify_success("Translation saved")
            st.rerun()
