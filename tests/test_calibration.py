import numpy as np
import pytest

from domain.calibration import (
    CalibrationError, calibration_stats, fit_axis, fit_transform, padded_bounds, place,
    plan_calibration, total_stats,
)
from domain.models import Bounds, CalibrationPoint, ClubMarker
from domain.policies import PortalPolicies
from services.calibration import TABLE, CalibrationService
from services.notifications import recent_events
from services.repository import Repository


def make_marker(id, name="Club", country="England", x=None, y=None, lat=None, lng=None, cal=False):
    return ClubMarker(
        id=id, club_name=name, country=country,
        x_position=x, y_position=y, latitude=lat, longitude=lng,
        is_calibration_point=cal,
    )


# x = 10 * lng + 500, y = -15 * lat + 1000
def exact_xy(lat, lng):
    return 10 * lng + 500, -15 * lat + 1000


REFS = [(51.5, -0.13), (40.4, -3.7), (48.2, 16.37)]


def exact_refs(country="England"):
    out = []
    for i, (lat, lng) in enumerate(REFS):
        x, y = exact_xy(lat, lng)
        out.append(make_marker(f"ref{i}", f"Ref {i}", country, x, y, lat, lng, cal=True))
    return out


def test_fit_axis_reproduces_exact_line():
    fit = fit_axis([0.0, 1.0, 2.0], [10.0, 12.0, 14.0])
    assert fit.slope == pytest.approx(2.0)
    assert fit.intercept == pytest.approx(10.0)
    assert fit.r2 == pytest.approx(1.0)
    assert fit.predict(5.0) == pytest.approx(20.0)


def test_fit_axis_is_least_squares():
    xs = [1.0, 2.0, 3.0, 4.0]
    ys = [2.1, 3.9, 6.2, 7.8]
    fit = fit_axis(xs, ys)
    slope, intercept = np.polyfit(xs, ys, 1)
    assert fit.slope == pytest.approx(slope)
    assert fit.intercept == pytest.approx(intercept)
    assert 0.9 < fit.r2 < 1.0
    # Non-linear points are not reproduced exactly
    assert any(abs(fit.predict(x) - y) > 1e-6 for x, y in zip(xs, ys))


def test_fit_axis_zero_variance_fails_cleanly():
    with pytest.raises(CalibrationError):
        fit_axis([5.0, 5.0, 5.0], [1.0, 2.0, 3.0])


def test_fit_transform_identical_longitudes_fails():
    points = [CalibrationPoint(lat=lat, lng=2.0, x=100 + i, y=200 + i) for i, lat in enumerate([40.0, 45.0, 50.0])]
    with pytest.raises(CalibrationError):
        fit_transform(points)


def test_fit_transform_needs_three_points():
    points = [CalibrationPoint(lat=40.0, lng=1.0, x=10, y=10), CalibrationPoint(lat=50.0, lng=5.0, x=50, y=90)]
    with pytest.raises(CalibrationError):
        fit_transform(points)


def test_fit_transform_exact_points_round_trip():
    points = [CalibrationPoint(lat, lng, *exact_xy(lat, lng)) for lat, lng in REFS]
    t = fit_transform(points)
    for p in points:
        x, y = t.transform(p.lat, p.lng)
        assert x == pytest.approx(p.x)
        assert y == pytest.approx(p.y)


def test_padded_bounds():
    points = [CalibrationPoint(0, 0, 100, 50), CalibrationPoint(0, 0, 300, 250)]
    b = padded_bounds(points, 20)
    assert b == Bounds(min_x=80, min_y=30, max_x=320, max_y=270)


def test_place_stays_inside_bounds():
    points = [CalibrationPoint(lat, lng, *exact_xy(lat, lng)) for lat, lng in REFS]
    t = fit_transform(points)
    bounds = padded_bounds(points, 20)
    rng = np.random.default_rng(7)
    # Includes locations far outside the reference area
    for lat, lng in [(45.0, 5.0), (60.0, 30.0), (35.0, -10.0), (51.5, -0.13)]:
        for _ in range(50):
            x, y = place(t, lat, lng, bounds, 8.0, rng)
            assert bounds.contains(x, y)
            assert round(x, 1) == x and round(y, 1) == y


def test_place_without_jitter_is_prediction():
    points = [CalibrationPoint(lat, lng, *exact_xy(lat, lng)) for lat, lng in REFS]
    t = fit_transform(points)
    bounds = padded_bounds(points, 20)
    x, y = place(t, 45.0, 5.0, bounds, jitter_span=0)
    ex, ey = exact_xy(45.0, 5.0)
    assert (x, y) == (round(ex, 1), round(ey, 1))


def test_plan_calibration_moves_only_non_reference_markers():
    markers = exact_refs() + [
        make_marker("a", "Target", lat=45.0, lng=5.0, x=0, y=0),
        make_marker("b", "No coords", x=1, y=1),
    ]
    plan = plan_calibration(markers, PortalPolicies(jitterSpan=0))
    assert [p.marker_id for p in plan.positions] == ["a"]
    ex, ey = exact_xy(45.0, 5.0)
    assert plan.positions[0].x == pytest.approx(ex)
    assert plan.positions[0].y == pytest.approx(ey)
    assert plan.reference_count == 3
    # Inputs untouched
    assert markers[3].x_position == 0


def test_plan_calibration_country_scope():
    markers = exact_refs("Spain") + [make_marker("a", "Target", country="England", lat=45.0, lng=5.0)]
    with pytest.raises(CalibrationError):
        plan_calibration(markers, country="England")
    plan = plan_calibration(markers, country="Spain")
    assert plan.positions == []
    assert plan.country == "Spain"
    assert len(plan_calibration(markers, country="all").positions) == 1


def test_calibration_stats():
    markers = exact_refs() + [
        make_marker("a", country="Spain", lat=1.0, lng=2.0),
        make_marker("b", country=None),
    ]
    stats = calibration_stats(markers)
    assert stats["England"] == {"total": 3, "calibrated": 3, "with_lat_lng": 3}
    assert stats["Spain"] == {"total": 1, "calibrated": 0, "with_lat_lng": 1}
    assert stats["Unknown"]["total"] == 1
    assert total_stats(stats) == {"total": 5, "calibrated": 3, "with_lat_lng": 4}


def _seed(repo, markers):
    for m in markers:
        repo.insert(TABLE, m.model_dump())


def test_service_refuses_fewer_than_three_points_without_writing(tmp_path):
    repo = Repository(tmp_path)
    _seed(repo, exact_refs()[:2] + [make_marker("a", lat=45.0, lng=5.0, x=1, y=2)])
    before = repo.select(TABLE)
    with pytest.raises(CalibrationError):
        CalibrationService(repo).apply()
    assert repo.select(TABLE) == before
    assert recent_events(repo) == []


def test_service_degenerate_fit_writes_nothing(tmp_path):
    repo = Repository(tmp_path)
    refs = [make_marker(f"r{i}", x=100 + 10 * i, y=100 + 20 * i, lat=40.0 + i, lng=3.0, cal=True) for i in range(3)]
    _seed(repo, refs + [make_marker("a", lat=45.0, lng=5.0, x=1, y=2)])
    before = repo.select(TABLE)
    with pytest.raises(CalibrationError):
        CalibrationService(repo).apply()
    assert repo.select(TABLE) == before


def test_service_apply_updates_and_notifies(tmp_path):
    repo = Repository(tmp_path)
    _seed(repo, exact_refs() + [make_marker("a", "Target", lat=45.0, lng=5.0, x=1, y=2)])
    result = CalibrationService(repo).apply(seed=1)
    assert result.updated == 1 and result.failed == 0
    row = repo.get(TABLE, "a")
    assert result.plan.bounds.contains(row["x_position"], row["y_position"])
    # Reference markers keep their hand-placed positions
    ref = repo.get(TABLE, "ref0")
    assert (ref["x_position"], ref["y_position"]) == exact_xy(*REFS[0])
    events = recent_events(repo, event_type="calibration_applied")
    assert len(events) == 1
    assert events[0].event_data["updated"] == 1


def test_preview_and_apply_agree_with_same_seed(tmp_path):
    repo = Repository(tmp_path)
    _seed(repo, exact_refs() + [make_marker("a", "Target", lat=45.0, lng=5.0, x=1, y=2)])
    service = CalibrationService(repo)
    planned = service.preview(seed=3).positions[0]
    service.apply(seed=3)
    row = repo.get(TABLE, "a")
    assert (row["x_position"], row["y_position"]) == (planned.x, planned.y)


def test_mark_calibration_point_looks_up_coordinates(tmp_path):
    repo = Repository(tmp_path)
    _seed(repo, [
        make_marker("mu", "Manchester United", "England", x=300, y=200),
        make_marker("unplaced", "Arsenal FC", "England"),
        make_marker("nowhere", "Atlantis FC", "Nowhere", x=10, y=10),
    ])
    service = CalibrationService(repo)
    m = service.mark_calibration_point("mu")
    assert m.is_calibration_point
    assert m.latitude == pytest.approx(53.4808)
    with pytest.raises(CalibrationError):
        service.mark_calibration_point("unplaced")
    with pytest.raises(CalibrationError):
        service.mark_calibration_point("nowhere")
    assert repo.get(TABLE, "nowhere")["is_calibration_point"] is False


def test_populate_coordinates_fills_known_clubs(tmp_path):
    repo = Repository(tmp_path)
    _seed(repo, [
        make_marker("mu", "Manchester United", "England"),
        make_marker("x", "Atlantis FC", "Nowhere"),
        make_marker("done", "Real Madrid", "Spain", lat=1.0, lng=1.0),
    ])
    assert CalibrationService(repo).populate_coordinates() == 1
    assert repo.get(TABLE, "mu")["longitude"] == pytest.approx(-2.2426)
    assert repo.get(TABLE, "done")["latitude"] == 1.0


def test_policies_file_cannot_lower_minimum(tmp_path):
    (tmp_path / "policies.json").write_text('{"minCalibrationPoints": 2, "jitterSpan": 0}', encoding="utf-8")
    pol = Repository(tmp_path).load_policies()
    assert pol.minCalibrationPoints == 3
    assert pol.jitterSpan == 0.0
