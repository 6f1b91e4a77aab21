import streamlit as st

from components.banners import notify_success, report_failure
from domain.formatting import format_ig_handle, format_phone_for_whatsapp
from services.monitoring import init_monitoring
from services.portal import list_players, save_player
from services.repository import Repository

st.set_page_config(page_title="Player Admin", page_icon="🗂️", layout="wide")
init_monitoring()

st.title("🗂️ Player Admin")
repo = Repository()

try:
    players = list_players(repo, visible_only=False)
except Exception as e:
    report_failure("Loading players", e)
    st.stop()

editing = st.sidebar.selectbox(
    "Player",
    options=[None] + [p.id for p in players],
    format_func=lambda i: "New player" if i is None else next(p.name for p in players if p.id == i),
)
current = next((p for p in players if p.id == editing), None)

if current:
    links = []
    handle = format_ig_handle(current.instagram_handle)
    if handle:
        links.append(f"[Instagram](https://instagram.com/{handle})")
    if current.phone:
        links.append(f"[WhatsApp](https://wa.me/{format_phone_for_whatsapp(current.phone, current.club)})")
    if links:
        st.markdown(" · ".join(links))

with st.form("player_form", clear_on_submit=current is None):
    c1, c2, c3 = st.columns(3)
    name = c1.text_input("Name", value=current.name if current else "")
    position = c2.text_input("Position", value=(current.position or "") if current else "")
    club = c3.text_input("Club", value=(current.club or "") if current else "")
    nationality = c1.text_input("Nationality", value=(current.nationality or "") if current else "")
    age = c2.number_input("Age", min_value=0, max_value=60, value=(current.age or 0) if current else 0)
    visible = c3.checkbox("Visible on public page", value=current.is_visible if current else True)
    instagram = c1.text_input("Instagram", value=(current.instagram_handle or "") if current else "")
    phone = c2.text_input("Phone", value=(current.phone or "") if current else "")
    r1, r2 = st.columns(2)
    # Empty inputs mean "no score"; 0.0 is a real value
    r90 = r1.number_input("R90 score", value=current.r90_score if current else None, format="%.2f", placeholder="No score")
    action = r2.number_input("Action score", min_value=0.0, value=current.performance_action_score if current else None, format="%.3f", placeholder="No score")
    bio = st.text_area("Bio", value=(current.bio or "") if current else "")
    submitted = st.form_submit_button("Save")

if submitted:
    try:
        saved = save_player(repo, {
            "name": name,
            "position": position or None,
            "club": club or None,
            "nationality": nationality or None,
            "age": int(age) or None,
            "is_visible": visible,
            "instagram_handle": format_ig_handle(instagram),
            "phone": phone or None,
            "r90_score": r90,
            "performance_action_score": action,
            "bio": bio or None,
        }, current.id if current else None)
    except Exception as e:
        report_failure("Saving player", e)
    else:
        notify_success(f"{saved.name} saved")
        st.rerun()
