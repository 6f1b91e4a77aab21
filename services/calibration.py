"""
Map calibration workflow over the ``club_map_positions`` table:
populate coordinates, mark calibration points, apply a calibration run.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np

from domain.calibration import CalibrationError, calibration_stats, plan_calibration
from domain.geo import get_club_coordinates
from domain.models import CalibrationPlan, ClubMarker
from domain.policies import PortalPolicies

from .monitoring import get_logger, timed
from .notifications import record_event
from .repository import Repository, RepositoryError

TABLE = "club_map_positions"

logger = get_logger(__name__)


@dataclass
class CalibrationResult:
    updated: int
    failed: int
    plan: CalibrationPlan


class CalibrationService:
    def __init__(self, repo: Repository, policies: Optional[PortalPolicies] = None) -> None:
        self.repo = repo
        self.policies = policies or repo.load_policies()

    def markers(self, country: Optional[str] = None) -> List[ClubMarker]:
        filters = {"country": country} if country not in (None, "", "all") else None
        return self.repo.fetch(ClubMarker, TABLE, filters, order_by="club_name")

    def countries(self) -> List[str]:
        return sorted({m.country for m in self.markers() if m.country})

    def stats(self) -> Dict[str, Dict[str, int]]:
        return calibration_stats(self.markers())

    def add_marker(self, club_name: str, country: Optional[str], city: Optional[str] = None) -> ClubMarker:
        if not club_name or not club_name.strip():
            raise ValueError("Club name is required.")
        row = self.repo.insert(TABLE, {
            "club_name": club_name.strip(),
            "country": country or None,
            "city": city or None,
            "x_position": None,
            "y_position": None,
            "latitude": None,
            "longitude": None,
            "is_calibration_point": False,
        })
        return ClubMarker.model_validate(row)

    def move_marker(self, marker_id: str, x: float, y: float) -> ClubMarker:
        """Manual drag: store the new pixel position as-is."""
        row = self.repo.update(TABLE, marker_id, {"x_position": round(float(x), 1), "y_position": round(float(y), 1)})
        return ClubMarker.model_validate(row)

    def reset_marker(self, marker_id: str, x: float, y: float) -> ClubMarker:
        """Put a marker back on a preset position and drop its reference flag."""
        row = self.repo.update(TABLE, marker_id, {
            "x_position": x,
            "y_position": y,
            "is_calibration_point": False,
        })
        return ClubMarker.model_validate(row)

    @timed()
    def populate_coordinates(self) -> int:
        """Fill missing lat/lng from the city tables; returns how many were updated."""
        updated = 0
        for m in self.markers():
            if m.has_coordinates:
                continue
            coords = get_club_coordinates(m.club_name, m.country or "")
            if coords is None:
                continue
            lat, lng = coords
            try:
                self.repo.update(TABLE, m.id, {"latitude": lat, "longitude": lng})
                updated += 1
            except RepositoryError as e:
                logger.warning(f"Could not set coordinates for {m.club_name}: {e}")
        logger.info(f"Populated coordinates for {updated} clubs")
        return updated

    def mark_calibration_point(self, marker_id: str) -> ClubMarker:
        m = self.repo.fetch_one(ClubMarker, TABLE, marker_id)
        if not m.has_position:
            raise CalibrationError(f"Place {m.club_name} on the map before marking it as a calibration point.")
        lat, lng = m.latitude, m.longitude
        if not m.has_coordinates:
            coords = get_club_coordinates(m.club_name, m.country or "")
            if coords is None:
                raise CalibrationError("Cannot find geographic coordinates for this club")
            lat, lng = coords
        row = self.repo.update(TABLE, marker_id, {
            "is_calibration_point": True,
            "latitude": lat,
            "longitude": lng,
        })
        logger.info(f"{m.club_name} marked as calibration point")
        return ClubMarker.model_validate(row)

    def unmark_calibration_point(self, marker_id: str) -> ClubMarker:
        row = self.repo.update(TABLE, marker_id, {"is_calibration_point": False})
        return ClubMarker.model_validate(row)

    def preview(self, country: Optional[str] = None, seed: Optional[int] = None) -> CalibrationPlan:
        return plan_calibration(self.markers(), self.policies, country, np.random.default_rng(seed))

    @timed()
    def apply(self, country: Optional[str] = None, seed: Optional[int] = None) -> CalibrationResult:
        """Fit and write new positions.

        The plan is computed before anything is written, so a refused or
        degenerate calibration leaves every row untouched.
        """
        plan = self.preview(country, seed)
        updated = failed = 0
        for pos in plan.positions:
            try:
                self.repo.update(TABLE, pos.marker_id, {"x_position": pos.x, "y_position": pos.y})
                updated += 1
            except RepositoryError as e:
                failed += 1
                logger.warning(f"Could not move {pos.club_name}: {e}")
        scope = plan.country or "all countries"
        logger.info(f"Calibrated {updated} clubs in {scope} using {plan.reference_count} reference points")
        record_event(
            self.repo,
            "calibration_applied",
            "Map Calibrated",
            f"Calibrated {updated} clubs in {scope} using {plan.reference_count} reference points",
            {
                "country": plan.country,
                "updated": updated,
                "failed": failed,
                "x_fit": {"slope": plan.transform.x_fit.slope, "intercept": plan.transform.x_fit.intercept},
                "y_fit": {"slope": plan.transform.y_fit.slope, "intercept": plan.transform.y_fit.intercept},
            },
        )
        return CalibrationResult(updated=updated, failed=failed, plan=plan)
