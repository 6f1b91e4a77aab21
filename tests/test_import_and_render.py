import re
from pathlib import Path

import pytest

from components.board import board_png
from components.signature import typed_signature_data_url
from domain.models import ItemType, Point
from domain.tactics import TacticsBoard
from scripts.import_clubs import import_rows, read_rows, to_marker
from services.calibration import TABLE
from services.repository import Repository

CSV = """club_name,country,city,x,y,latitude,longitude,is_calibration_point
Manchester United,England,Manchester,310,190,53.4808,-2.2426,yes
Real Madrid,Spain,,,,,,
,Spain,,,,,,
Real Madrid,Spain,,,,,,
"""


def test_to_marker_parses_optional_columns():
    m = to_marker({"club_name": " SL Benfica ", "x": "12.5", "y": "", "is_calibration_point": "TRUE"})
    assert m["club_name"] == "SL Benfica"
    assert m["x_position"] == 12.5 and m["y_position"] is None
    assert m["is_calibration_point"] is True
    assert m["country"] is None


def test_import_rows_skips_duplicates_and_invalid(tmp_path):
    fp = tmp_path / "clubs.csv"
    fp.write_text(CSV, encoding="utf-8")
    repo = Repository(tmp_path)
    counts = import_rows(repo, read_rows(fp))
    assert counts == {"inserted": 2, "skipped": 1, "invalid": 1}
    rows = repo.select(TABLE, order_by="club_name")
    assert [r["club_name"] for r in rows] == ["Manchester United", "Real Madrid"]
    assert rows[0]["is_calibration_point"] is True
    # Running again inserts nothing
    assert import_rows(repo, read_rows(fp))["inserted"] == 0


def test_board_png_renders_all_entities():
    board = TacticsBoard()
    board.add_item(ItemType.FOOTBALL, 400, 260)
    board.add_arrow(Point(100, 100), Point(300, 200))
    board.add_path([Point(500, 100), Point(550, 150), Point(600, 120)])
    png = board_png(board)
    assert png.startswith(b"\x89PNG")


def test_typed_signature_data_url():
    url = typed_signature_data_url("Jane Doe")
    assert url.startswith("data:image/png;base64,")
    with pytest.raises(ValueError):
        typed_signature_data_url("  ")


def test_app_styles_only_classes_the_components_use():
    root = Path(__file__).resolve().parents[1]
    styled = set(re.findall(r"^\s*\.([a-z-]+)\s*\{", (root / "app.py").read_text(encoding="utf-8"), re.M))
    used = set()
    for fp in (root / "components").glob("*.py"):
        used |= set(re.findall(r"class='([a-z-]+)'", fp.read_text(encoding="utf-8")))
    assert styled == used == {"profile-card", "context-banner"}
