"""
Seed club_map_positions from a CSV file.

    python -m scripts.import_clubs clubs.csv [--populate] [--data-dir DIR]

Columns: club_name, country, city, x, y, latitude, longitude,
is_calibration_point. Only club_name is required. Clubs already present
(same name and country) are skipped.
"""
from __future__ import annotations

import argparse
import csv
from pathlib import Path
from typing import Dict, List, Optional

from services.calibration import TABLE, CalibrationService
from services.monitoring import get_logger
from services.repository import Repository

logger = get_logger(__name__)

_TRUE = {"1", "true", "yes", "y"}


def read_rows(csv_path: Path) -> List[dict]:
    rows = []
    with csv_path.open("r", encoding="utf-8", newline="") as f:
        r = csv.DictReader(f)
        for row in r:
            rows.append(row)
    return rows


def _num(value: Optional[str]) -> Optional[float]:
    if value is None or not value.strip():
        return None
    return float(value)


def to_marker(row: Dict[str, str]) -> dict:
    name = (row.get("club_name") or "").strip()
    if not name:
        raise ValueError("club_name is required")
    return {
        "club_name": name,
        "country": (row.get("country") or "").strip() or None,
        "city": (row.get("city") or "").strip() or None,
        "x_position": _num(row.get("x")),
        "y_position": _num(row.get("y")),
        "latitude": _num(row.get("latitude")),
        "longitude": _num(row.get("longitude")),
        "is_calibration_point": (row.get("is_calibration_point") or "").strip().lower() in _TRUE,
    }


def import_rows(repo: Repository, rows: List[dict]) -> Dict[str, int]:
    existing = {(r.get("club_name"), r.get("country")) for r in repo.select(TABLE)}
    counts = {"inserted": 0, "skipped": 0, "invalid": 0}
    for i, row in enumerate(rows, start=2):
        try:
            marker = to_marker(row)
        except ValueError as e:
            logger.warning(f"Line {i}: {e}")
            counts["invalid"] += 1
            continue
        key = (marker["club_name"], marker["country"])
        if key in existing:
            counts["skipped"] += 1
            continue
        repo.insert(TABLE, marker)
        existing.add(key)
        counts["inserted"] += 1
    return counts


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Import clubs into the scouting map.")
    parser.add_argument("csv", type=str)
    parser.add_argument("--data-dir", type=str, default=None)
    parser.add_argument("--populate", action="store_true", help="Fill missing lat/lng from the city tables afterwards.")
    args = parser.parse_args()
    repo = Repository(Path(args.data_dir) if args.data_dir else None)
    counts = import_rows(repo, read_rows(Path(args.csv)))
    print(f"Imported {counts['inserted']} clubs ({counts['skipped']} already present, {counts['invalid']} invalid)")
    if args.populate:
        n = CalibrationService(repo).populate_coordinates()
        print(f"Populated coordinates for {n} clubs")
