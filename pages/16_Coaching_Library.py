import streamlit as st

from components.banners import notify_success, report_failure
from services.coaching import (
    COACHING_KINDS, delete_item, filter_options, list_items, page_count, save_item,
)
from services.monitoring import init_monitoring
from services.repository import Repository

st.set_page_config(page_title="Coaching Library", page_icon="📚", layout="wide")
init_monitoring()

st.title("📚 Coaching Library")
repo = Repository()

kind = st.sidebar.radio("Library", list(COACHING_KINDS), format_func=lambda k: COACHING_KINDS[k][0])
label = COACHING_KINDS[kind][0]

try:
    categories, tags = filter_options(repo, kind)
except Exception as e:
    report_failure("Loading filters", e)
    categories, tags = [], []

search = st.sidebar.text_input("Search")
category = st.sidebar.selectbox("Category", ["all"] + categories, format_func=lambda c: "All categories" if c == "all" else c)
tag = st.sidebar.selectbox("Tag", ["all"] + tags, format_func=lambda t: "All tags" if t == "all" else t)
page = st.session_state.get(f"page_{kind}", 1)

try:
    items, total = list_items(repo, kind, category, tag, search, page)
except Exception as e:
    report_failure(f"Loading {label.lower()}", e)
    st.stop()

pages = page_count(total)
st.caption(f"{total} {label.lower()} · page {min(page, pages)} of {pages}")

for item in items:
    with st.expander(item.title):
        meta = [x for x in (item.category, ", ".join(item.tags)) if x]
        if meta:
            st.caption(" • ".join(meta))
        if item.description:
            st.write(item.description)
        extras = {f: getattr(item, f) for f in COACHING_KINDS[kind][1] if getattr(item, f) is not None}
        if extras:
            st.json(extras)
        if item.content:
            st.markdown(item.content)
        if st.button("Edit", key=f"edit_{item.id}"):
            st.session_state["editing_item"] = item.id
            st.rerun()
        if st.button("Delete", key=f"del_{item.id}"):
            try:
                delete_item(repo, kind, item.id)
            except Exception as e:
                report_failure("Deleting item", e)
            else:
                notify_success("Item deleted successfully")
                st.rerun()

p1, _, p2 = st.columns([1, 4, 1])
if p1.button("◀ Prev", disabled=page <= 1):
    st.session_state[f"page_{kind}"] = page - 1
    st.rerun()
if p2.button("Next ▶", disabled=page >= pages):
    st.session_state[f"page_{kind}"] = page + 1
    st.rerun()

st.divider()
current = next((i for i in items if i.id == st.session_state.get("editing_item")), None)
with st.form("coaching_form", clear_on_submit=current is None):
    st.subheader(f"Edit {current.title}" if current else f"New {label.lower()} item")
    data = {
        "title": st.text_input("Title", value=current.title if current else ""),
        "description": st.text_area("Description", value=(current.description or "") if current else ""),
        "content": st.text_area("Content", value=(current.content or "") if current else "", height=200),
        "category": st.text_input("Category", value=(current.category or "") if current else ""),
        "tags": st.text_input("Tags (comma separated)", value=", ".join(current.tags) if current else ""),
    }
    # Kind-specific columns are free text; the row model converts numeric ones
    for f in COACHING_KINDS[kind][1]:
        value = getattr(current, f) if current else None
        data[f] = st.text_input(f.replace("_", " ").capitalize(), value="" if value is None else str(value))
    submitted = st.form_submit_button("Save")

if submitted:
    try:
        save_item(repo, kind, data, current.id if current else None)
    except Exception as e:
        report_failure("Saving item", e)
    else:
        st.session_state.pop("editing_item", None)
        notify_success("Item updated successfully" if current else "Item created successfully")
        st.rerun()
