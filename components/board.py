"""
Tactics board rendering with matplotlib.

Board coordinates are pixels with the origin at the top-left corner, so the
y axis is inverted when drawing.
"""
from __future__ import annotations

import io

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.patches import Arc, Circle, Rectangle

from domain.models import ItemType
from domain.tactics import TacticsBoard

BOARD_WIDTH = 800
BOARD_HEIGHT = 520

PITCH_GREEN = "#2e7d32"
LINE_COLOR = "white"
INK = "#ffeb3b"

_ITEM_STYLE = {
    ItemType.FOOTBALL: {"marker": "o", "color": "white", "edge": "black"},
    ItemType.X: {"marker": "X", "color": "#d32f2f", "edge": "white"},
    ItemType.O: {"marker": "o", "color": "#1565c0", "edge": "white"},
}


def _draw_pitch(ax) -> None:
    ax.add_patch(Rectangle((0, 0), BOARD_WIDTH, BOARD_HEIGHT, color=PITCH_GREEN, zorder=0))
    m = 20
    w, h = BOARD_WIDTH - 2 * m, BOARD_HEIGHT - 2 * m
    cx, cy = BOARD_WIDTH / 2, BOARD_HEIGHT / 2
    lw = 1.5
    ax.add_patch(Rectangle((m, m), w, h, fill=False, ec=LINE_COLOR, lw=lw))
    ax.plot([cx, cx], [m, BOARD_HEIGHT - m], color=LINE_COLOR, lw=lw)
    ax.add_patch(Circle((cx, cy), 60, fill=False, ec=LINE_COLOR, lw=lw))
    ax.add_patch(Circle((cx, cy), 3, color=LINE_COLOR))
    box_w, box_h = 110, 260
    six_w, six_h = 40, 120
    for left in (True, False):
        x0 = m if left else BOARD_WIDTH - m - box_w
        ax.add_patch(Rectangle((x0, cy - box_h / 2), box_w, box_h, fill=False, ec=LINE_COLOR, lw=lw))
        x6 = m if left else BOARD_WIDTH - m - six_w
        ax.add_patch(Rectangle((x6, cy - six_h / 2), six_w, six_h, fill=False, ec=LINE_COLOR, lw=lw))
        spot = m + 80 if left else BOARD_WIDTH - m - 80
        ax.add_patch(Circle((spot, cy), 2.5, color=LINE_COLOR))
        # Arc outside the penalty area
        theta = (-53, 53) if left else (127, 233)
        ax.add_patch(Arc((spot, cy), 120, 120, theta1=theta[0], theta2=theta[1], ec=LINE_COLOR, lw=lw))


def board_figure(board: TacticsBoard, show_pitch: bool = True):
    fig, ax = plt.subplots(figsize=(BOARD_WIDTH / 100, BOARD_HEIGHT / 100), dpi=100)
    ax.set_xlim(0, BOARD_WIDTH)
    ax.set_ylim(BOARD_HEIGHT, 0)
    ax.set_aspect("equal")
    ax.axis("off")
    if show_pitch:
        _draw_pitch(ax)

    for path in board.paths:
        ax.plot([p.x for p in path.points], [p.y for p in path.points],
                color=INK, lw=3, solid_capstyle="round", zorder=2)

    for a in board.arrows:
        ax.annotate(
            "",
            xy=(a.end_x, a.end_y),
            xytext=(a.start_x, a.start_y),
            arrowprops={"arrowstyle": "-|>", "color": INK, "lw": 3, "mutation_scale": 20},
            zorder=3,
        )

    for item in board.items:
        style = _ITEM_STYLE[item.type]
        size = 180 if item.type == ItemType.FOOTBALL else 320
        ax.scatter([item.x], [item.y], s=size, marker=style["marker"],
                   c=style["color"], edgecolors=style["edge"], linewidths=1.5, zorder=4)

    fig.subplots_adjust(left=0, right=1, top=1, bottom=0)
    return fig


def board_png(board: TacticsBoard) -> bytes:
    """Board as PNG bytes for download."""
    fig = board_figure(board)
    buf = io.BytesIO()
    fig.savefig(buf, format="png", dpi=100)
    plt.close(fig)
    return buf.getvalue()
