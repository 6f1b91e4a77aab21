import matplotlib.pyplot as plt
import streamlit as st

from components.banners import notify_error
from components.board import BOARD_HEIGHT, BOARD_WIDTH, board_figure, board_png
from components.controls import board_toolbar
from domain.models import Point, Tool
from domain.tactics import TacticsBoard, parse_points
from services.monitoring import init_monitoring
from services.repository import Repository

st.set_page_config(page_title="Tactics Board", page_icon="📋", layout="wide")
init_monitoring()

st.title("📋 Tactics Board")

if "tactics_board" not in st.session_state:
    st.session_state["tactics_board"] = TacticsBoard(Repository().load_policies())
board: TacticsBoard = st.session_state["tactics_board"]

tool, dropped = board_toolbar()
if dropped is not None:
    board.add_item(dropped)

st.sidebar.divider()
u1, u2 = st.sidebar.columns(2)
if u1.button("↶ Undo", disabled=not board.can_undo, use_container_width=True):
    board.undo()
    st.rerun()
if u2.button("Clear", disabled=board.is_empty(), use_container_width=True):
    board.clear()
    st.rerun()


def _xy(prefix: str, default=(BOARD_WIDTH / 2, BOARD_HEIGHT / 2)):
    c1, c2 = st.columns(2)
    x = c1.number_input(f"{prefix} x", min_value=0.0, max_value=float(BOARD_WIDTH), value=float(default[0]), step=5.0, key=f"{prefix}_x")
    y = c2.number_input(f"{prefix} y", min_value=0.0, max_value=float(BOARD_HEIGHT), value=float(default[1]), step=5.0, key=f"{prefix}_y")
    return Point(x, y)


if tool == Tool.SELECT:
    if board.items:
        item_id = st.selectbox("Token", [i.id for i in board.items])
        item = next(i for i in board.items if i.id == item_id)
        target = _xy("Move to", (item.x, item.y))
        c1, c2 = st.columns(2)
        if c1.button("Move"):
            board.move_item(item.id, target.x, target.y)
            st.rerun()
        if c2.button("Remove"):
            board.remove_item(item.id)
            st.rerun()
    else:
        st.caption("Add a token from the sidebar to start.")
elif tool == Tool.DRAW:
    raw = st.text_area("Path points", placeholder="100,200; 150,220; 200,260")
    if st.button("Draw path"):
        try:
            if board.add_path(parse_points(raw)) is None:
                notify_error("A path needs at least two points")
        except ValueError as e:
            notify_error(str(e))
        else:
            st.rerun()
elif tool == Tool.ARROW:
    start = _xy("Start", (300, 260))
    end = _xy("End", (500, 260))
    if st.button("Draw arrow"):
        if board.add_arrow(start, end) is None:
            notify_error("Arrow is too short")
        else:
            st.rerun()
else:
    click = _xy("Erase at")
    if st.button("Erase"):
        if board.erase_at(click):
            st.rerun()
        else:
            st.toast("Nothing to erase there")

fig = board_figure(board)
st.pyplot(fig)
plt.close(fig)

st.download_button("Download PNG", data=board_png(board), file_name="tactics-board.png", mime="image/png")
