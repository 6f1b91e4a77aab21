"""
Scouting map plot: club markers on the stylized 1000x600 map, with
calibration points highlighted.
"""
from __future__ import annotations

from typing import List, Optional

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from domain.models import Bounds, ClubMarker

MAP_WIDTH = 1000
MAP_HEIGHT = 600


def map_figure(markers: List[ClubMarker], bounds: Optional[Bounds] = None, labels: bool = True):
    fig, ax = plt.subplots(figsize=(10, 6), dpi=100)
    ax.set_xlim(0, MAP_WIDTH)
    ax.set_ylim(MAP_HEIGHT, 0)
    ax.set_aspect("equal")
    ax.set_facecolor("#0b1d2a")
    ax.tick_params(labelsize=7)

    placed = [m for m in markers if m.has_position]
    regular = [m for m in placed if not m.is_calibration_point]
    refs = [m for m in placed if m.is_calibration_point]

    ax.scatter([m.x_position for m in regular], [m.y_position for m in regular],
               s=20, c="#90caf9", label="Club", zorder=2)
    ax.scatter([m.x_position for m in refs], [m.y_position for m in refs],
               s=70, c="#ffca28", marker="*", edgecolors="black", linewidths=0.5,
               label="Calibration point", zorder=3)

    if labels and len(placed) <= 60:
        for m in placed:
            ax.annotate(m.club_name, (m.x_position, m.y_position), xytext=(4, 4),
                        textcoords="offset points", fontsize=6, color="white")

    if bounds is not None:
        ax.plot(
            [bounds.min_x, bounds.max_x, bounds.max_x, bounds.min_x, bounds.min_x],
            [bounds.min_y, bounds.min_y, bounds.max_y, bounds.max_y, bounds.min_y],
            ls="--", lw=1, color="#ef5350", label="Placement bounds",
        )

    ax.legend(loc="lower left", fontsize=7)
    fig.tight_layout()
    return fig
