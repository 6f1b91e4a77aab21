"""
Real-world coordinates for European football cities, and club -> city matching
used to populate latitude/longitude on map markers before calibration.
"""
from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Tuple

GEO_DIR = Path(__file__).resolve().parent.parent / "data" / "geo"


@lru_cache(maxsize=1)
def _cities() -> Tuple[dict, ...]:
    fp = GEO_DIR / "cities.json"
    if not fp.exists():
        return ()
    return tuple(json.loads(fp.read_text(encoding="utf-8")))


@lru_cache(maxsize=1)
def _club_cities() -> Dict[str, str]:
    fp = GEO_DIR / "club_cities.json"
    if not fp.exists():
        return {}
    return json.loads(fp.read_text(encoding="utf-8"))


def _same_country(a: str, b: Optional[str]) -> bool:
    return bool(b) and (a == b or a.lower() == b.lower())


def cities_for(country: str) -> List[dict]:
    return [c for c in _cities() if _same_country(c["country"], country)]


def get_club_coordinates(club_name: str, country: Optional[str]) -> Optional[Tuple[float, float]]:
    """Return (lat, lng) for a club, or None when nothing matches.

    Order of preference:
    - the club's known home city, in the given country
    - that city in any country
    - a city of the given country whose name appears in the club name
    """
    city_name = _club_cities().get(club_name)
    if city_name:
        for c in _cities():
            if c["city"] == city_name and _same_country(c["country"], country):
                return c["lat"], c["lng"]
        for c in _cities():
            if c["city"] == city_name:
                return c["lat"], c["lng"]

    lowered = club_name.lower()
    for c in _cities():
        if _same_country(c["country"], country) and c["city"].lower() in lowered:
            return c["lat"], c["lng"]
    return None


def get_country_center(country: str) -> Optional[Tuple[float, float]]:
    """Mean latitude/longitude of the country's known cities."""
    rows = cities_for(country)
    if not rows:
        return None
    lat = sum(c["lat"] for c in rows) / len(rows)
    lng = sum(c["lng"] for c in rows) / len(rows)
    return lat, lng
