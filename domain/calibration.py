"""
Geo-calibration: fit geographic coordinates to map pixel coordinates.

The scouting map is a stylized image, so marker positions are learned from a
handful of clubs an administrator has placed by hand (calibration points).
Each axis is fitted on its own with ordinary least squares:

- x as a function of longitude
- y as a function of latitude

This assumes the map grid is axis-aligned with longitude/latitude (no
rotation or projection correction). Fitted positions get a little random
jitter so clubs from the same city do not stack, and are clamped to the
bounding box of the calibration points expanded by a padding margin.

This module has no Streamlit/UI code and never writes anything; callers get a
CalibrationPlan and decide whether to persist it.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np
from sklearn.linear_model import LinearRegression

from .models import (
    AxisFit, Bounds, CalibrationPlan, CalibrationPoint, ClubMarker,
    LinearTransform, PlannedPosition,
)
from .policies import PortalPolicies

# Inputs whose spread is below this are treated as constant
_MIN_SPREAD = 1e-9


class CalibrationError(ValueError):
    """Calibration refused or the fit is degenerate; nothing should be written."""


def fit_axis(inputs: Sequence[float], outputs: Sequence[float]) -> AxisFit:
    """Least-squares line through (input, output) pairs."""
    x = np.asarray(inputs, dtype=float)
    y = np.asarray(outputs, dtype=float)
    if x.shape != y.shape:
        raise CalibrationError("Inputs and outputs must have the same length.")
    if x.size < 2:
        raise CalibrationError("At least two samples are needed to fit a line.")
    if float(np.ptp(x)) < _MIN_SPREAD:
        # Zero variance in the input: the slope denominator vanishes
        raise CalibrationError("Calibration points share the same coordinate on one axis; spread them out.")
    X = x.reshape(-1, 1)
    model = LinearRegression().fit(X, y)
    return AxisFit(
        slope=float(model.coef_[0]),
        intercept=float(model.intercept_),
        r2=float(model.score(X, y)),
    )


def fit_transform(points: Sequence[CalibrationPoint], min_points: int = 3) -> LinearTransform:
    if len(points) < min_points:
        raise CalibrationError(f"Need at least {min_points} calibration points, got {len(points)}.")
    x_fit = fit_axis([p.lng for p in points], [p.x for p in points])
    y_fit = fit_axis([p.lat for p in points], [p.y for p in points])
    return LinearTransform(x_fit=x_fit, y_fit=y_fit)


def padded_bounds(points: Sequence[CalibrationPoint], padding: float) -> Bounds:
    if not points:
        raise CalibrationError("Cannot derive bounds without calibration points.")
    xs = [p.x for p in points]
    ys = [p.y for p in points]
    return Bounds(
        min_x=min(xs) - padding,
        min_y=min(ys) - padding,
        max_x=max(xs) + padding,
        max_y=max(ys) + padding,
    )


def place(
    transform: LinearTransform,
    lat: float,
    lng: float,
    bounds: Bounds,
    jitter_span: float = 8.0,
    rng: Optional[np.random.Generator] = None,
    decimals: int = 1,
) -> tuple[float, float]:
    """Predict a marker position, jitter it, round it and keep it inside bounds."""
    rng = rng if rng is not None else np.random.default_rng()
    x, y = transform.transform(lat, lng)
    half = jitter_span / 2.0
    if half > 0:
        x += float(rng.uniform(-half, half))
        y += float(rng.uniform(-half, half))
    # Round before clamping so the result never leaves the box
    return bounds.clamp(round(x, decimals), round(y, decimals))


def calibration_points(markers: Iterable[ClubMarker]) -> List[ClubMarker]:
    return [m for m in markers if m.is_calibration_point and m.has_position and m.has_coordinates]


def to_points(markers: Iterable[ClubMarker]) -> List[CalibrationPoint]:
    return [
        CalibrationPoint(lat=m.latitude, lng=m.longitude, x=m.x_position, y=m.y_position)  # type: ignore[arg-type]
        for m in markers
    ]


def markers_in_scope(markers: Iterable[ClubMarker], country: Optional[str]) -> List[ClubMarker]:
    if country in (None, "", "all"):
        return list(markers)
    return [m for m in markers if m.country == country]


def plan_calibration(
    markers: Sequence[ClubMarker],
    policies: Optional[PortalPolicies] = None,
    country: Optional[str] = None,
    rng: Optional[np.random.Generator] = None,
) -> CalibrationPlan:
    """Compute new positions for every non-reference marker with coordinates.

    With a country, only that country's calibration points and clubs are used;
    otherwise all calibration points on the map drive all clubs.
    Raises CalibrationError when the fit cannot be made.
    """
    pol = policies or PortalPolicies()
    scope = markers_in_scope(markers, country)
    refs = calibration_points(scope)
    if len(refs) < pol.minCalibrationPoints:
        raise CalibrationError(
            f"Need at least {pol.minCalibrationPoints} calibration points. "
            "Position and mark more clubs as calibration points."
        )
    points = to_points(refs)
    transform = fit_transform(points, pol.minCalibrationPoints)
    bounds = padded_bounds(points, pol.boundsPadding)
    rng = rng if rng is not None else np.random.default_rng()

    plan = CalibrationPlan(
        transform=transform,
        bounds=bounds,
        reference_count=len(refs),
        country=None if country in (None, "", "all") else country,
    )
    for m in scope:
        if m.is_calibration_point or not m.has_coordinates:
            continue
        x, y = place(transform, m.latitude, m.longitude, bounds, pol.jitterSpan, rng, pol.positionDecimals)  # type: ignore[arg-type]
        plan.positions.append(PlannedPosition(marker_id=m.id, club_name=m.club_name, x=x, y=y))
    return plan


def calibration_stats(markers: Iterable[ClubMarker]) -> Dict[str, Dict[str, int]]:
    """Per-country counts: total clubs, calibration points, clubs with lat/lng."""
    stats: Dict[str, Dict[str, int]] = {}
    for m in markers:
        s = stats.setdefault(m.country or "Unknown", {"total": 0, "calibrated": 0, "with_lat_lng": 0})
        s["total"] += 1
        if m.is_calibration_point and m.has_position:
            s["calibrated"] += 1
        if m.has_coordinates:
            s["with_lat_lng"] += 1
    return stats


def total_stats(stats: Dict[str, Dict[str, int]]) -> Dict[str, int]:
    out = {"total": 0, "calibrated": 0, "with_lat_lng": 0}
    for s in stats.values():
        for k in out:
            out[k] += s[k]
    return out
