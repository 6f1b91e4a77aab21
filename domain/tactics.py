"""
Tactics board state: dropped tokens, freehand paths and arrows on a pitch,
with click-to-erase hit-testing and a bounded undo history.

No Streamlit/UI code here; components.board renders a TacticsBoard.
"""
from __future__ import annotations

import copy
import math
import random
import uuid
from typing import List, Optional, Sequence, Tuple

from .models import Arrow, BoardSnapshot, DrawPath, DroppedItem, ItemType, Point
from .policies import PortalPolicies

# Tokens are drawn about this size; clicks inside count as hits
ITEM_HIT_RADIUS = 16.0


def _new_id(prefix: str) -> str:
    return f"{prefix}-{str(uuid.uuid4())[:8]}"


def distance(a: Point, b: Point) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def point_to_segment_distance(p: Point, arrow: Arrow) -> float:
    """Distance from p to the arrow's segment (projection clamped to the ends)."""
    a = p.x - arrow.start_x
    b = p.y - arrow.start_y
    c = arrow.end_x - arrow.start_x
    d = arrow.end_y - arrow.start_y
    len_sq = c * c + d * d
    t = (a * c + b * d) / len_sq if len_sq != 0 else -1.0
    if t < 0:
        xx, yy = arrow.start_x, arrow.start_y
    elif t > 1:
        xx, yy = arrow.end_x, arrow.end_y
    else:
        xx, yy = arrow.start_x + t * c, arrow.start_y + t * d
    return math.hypot(p.x - xx, p.y - yy)


def path_distance(p: Point, path: DrawPath) -> float:
    """Distance from p to the closest stored point of the path."""
    if not path.points:
        return math.inf
    return min(distance(p, q) for q in path.points)


class TacticsBoard:
    def __init__(self, policies: Optional[PortalPolicies] = None, rng: Optional[random.Random] = None) -> None:
        self.policies = policies or PortalPolicies()
        self.items: List[DroppedItem] = []
        self.arrows: List[Arrow] = []
        self.paths: List[DrawPath] = []
        self.history: List[BoardSnapshot] = []
        self._rng = rng or random.Random()

    # -- history -----------------------------------------------------------
    def _save_history(self) -> None:
        self.history.append(BoardSnapshot(
            items=copy.deepcopy(self.items),
            arrows=copy.deepcopy(self.arrows),
            paths=copy.deepcopy(self.paths),
        ))
        limit = self.policies.historyLimit
        if len(self.history) > limit:
            self.history = self.history[-limit:]

    def undo(self) -> bool:
        if not self.history:
            return False
        last = self.history.pop()
        self.items, self.arrows, self.paths = last.items, last.arrows, last.paths
        return True

    @property
    def can_undo(self) -> bool:
        return bool(self.history)

    # -- items -------------------------------------------------------------
    def add_item(self, item_type: ItemType, x: Optional[float] = None, y: Optional[float] = None) -> DroppedItem:
        self._save_history()
        item = DroppedItem(
            id=_new_id(item_type.value),
            type=item_type,
            x=x if x is not None else 200 + self._rng.random() * 200,
            y=y if y is not None else 150 + self._rng.random() * 100,
        )
        self.items.append(item)
        return item

    def item_at(self, p: Point) -> Optional[DroppedItem]:
        best: Optional[Tuple[float, DroppedItem]] = None
        for item in self.items:
            d = math.hypot(item.x - p.x, item.y - p.y)
            if d < ITEM_HIT_RADIUS and (best is None or d < best[0]):
                best = (d, item)
        return best[1] if best else None

    def move_item(self, item_id: str, x: float, y: float) -> bool:
        item = next((i for i in self.items if i.id == item_id), None)
        if item is None:
            return False
        self._save_history()
        item.x, item.y = x, y
        return True

    def remove_item(self, item_id: str) -> bool:
        if not any(i.id == item_id for i in self.items):
            return False
        self._save_history()
        self.items = [i for i in self.items if i.id != item_id]
        return True

    # -- drawing -----------------------------------------------------------
    def add_path(self, points: Sequence[Point]) -> Optional[DrawPath]:
        if len(points) < 2:
            return None
        self._save_history()
        path = DrawPath(id=_new_id("path"), points=[Point(p.x, p.y) for p in points])
        self.paths.append(path)
        return path

    def add_arrow(self, start: Point, end: Point) -> Optional[Arrow]:
        span = self.policies.minArrowSpan
        # Short drags are treated as clicks
        if abs(end.x - start.x) <= span and abs(end.y - start.y) <= span:
            return None
        self._save_history()
        arrow = Arrow(id=_new_id("arrow"), start_x=start.x, start_y=start.y, end_x=end.x, end_y=end.y)
        self.arrows.append(arrow)
        return arrow

    # -- erasing -----------------------------------------------------------
    def nearest_arrow(self, p: Point) -> Optional[Arrow]:
        best: Optional[Tuple[float, Arrow]] = None
        for arrow in self.arrows:
            d = point_to_segment_distance(p, arrow)
            if d < self.policies.arrowEraseThreshold and (best is None or d < best[0]):
                best = (d, arrow)
        return best[1] if best else None

    def nearest_path(self, p: Point) -> Optional[DrawPath]:
        best: Optional[Tuple[float, DrawPath]] = None
        for path in self.paths:
            d = path_distance(p, path)
            if d < self.policies.pathEraseRadius and (best is None or d < best[0]):
                best = (d, path)
        return best[1] if best else None

    def erase_at(self, p: Point) -> bool:
        """Remove the nearest token, arrow and path under the click.

        Returns False (and leaves history untouched) when nothing is hit.
        """
        item = self.item_at(p)
        arrow = self.nearest_arrow(p)
        path = self.nearest_path(p)
        if item is None and arrow is None and path is None:
            return False
        self._save_history()
        if item is not None:
            self.items = [i for i in self.items if i.id != item.id]
        if arrow is not None:
            self.arrows = [a for a in self.arrows if a.id != arrow.id]
        if path is not None:
            self.paths = [q for q in self.paths if q.id != path.id]
        return True

    def clear(self) -> None:
        self._save_history()
        self.items, self.arrows, self.paths = [], [], []

    def is_empty(self) -> bool:
        return not (self.items or self.arrows or self.paths)


def parse_points(text: str) -> List[Point]:
    """Parse 'x,y; x,y; ...' into points. Raises ValueError on bad input."""
    points: List[Point] = []
    for chunk in text.replace("\n", ";").split(";"):
        chunk = chunk.strip()
        if not chunk:
            continue
        parts = [s.strip() for s in chunk.split(",")]
        if len(parts) != 2:
            raise ValueError(f"Expected 'x,y' but got {chunk!r}")
        points.append(Point(float(parts[0]), float(parts[1])))
    return points
