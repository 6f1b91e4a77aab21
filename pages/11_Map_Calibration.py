import matplotlib.pyplot as plt
import streamlit as st

from components.banners import notify_error, notify_success, page_banner, report_failure
from components.controls import country_filter
from components.map_view import MAP_HEIGHT, MAP_WIDTH, map_figure
from domain.calibration import CalibrationError, total_stats
from services.calibration import CalibrationService
from services.monitoring import init_monitoring
from services.repository import Repository

st.set_page_config(page_title="Map Calibration", page_icon="🗺️", layout="wide")
init_monitoring()

st.title("🗺️ Map Calibration")
service = CalibrationService(Repository())

try:
    countries = service.countries()
except Exception as e:
    report_failure("Loading clubs", e)
    st.stop()

country = country_filter(countries)
markers = service.markers(country)
stats = service.stats()
totals = total_stats(stats)
page_banner(country or "All countries", f"{len(markers)} clubs")

m1, m2, m3 = st.columns(3)
m1.metric("Clubs", totals["total"])
m2.metric("Calibration points", totals["calibrated"])
m3.metric("With coordinates", totals["with_lat_lng"])

with st.expander("Per-country breakdown"):
    st.dataframe(
        [{"Country": c, "Clubs": s["total"], "Calibrated": s["calibrated"], "With lat/lng": s["with_lat_lng"]} for c, s in sorted(stats.items())],
        hide_index=True,
        use_container_width=True,
    )

st.sidebar.divider()
if st.sidebar.button("Populate coordinates", use_container_width=True):
    try:
        n = service.populate_coordinates()
    except Exception as e:
        report_failure("Populating coordinates", e)
    else:
        notify_success(f"Filled coordinates for {n} clubs")
        st.rerun()

seed = st.sidebar.number_input("Jitter seed", min_value=0, value=0, step=1, help="Fixed seed makes preview and apply identical.")
preview_clicked = st.sidebar.button("Preview calibration", use_container_width=True)
apply_clicked = st.sidebar.button("Apply calibration", type="primary", use_container_width=True)

plan = None
if preview_clicked:
    try:
        plan = service.preview(country, int(seed))
    except CalibrationError as e:
        notify_error(str(e))

if apply_clicked:
    try:
        result = service.apply(country, int(seed))
    except CalibrationError as e:
        notify_error(str(e))
    except Exception as e:
        report_failure("Applying calibration", e)
    else:
        msg = f"Calibrated {result.updated} clubs using {result.plan.reference_count} reference points"
        if result.failed:
            msg += f" ({result.failed} failed)"
        notify_success(msg)
        st.rerun()

fig = map_figure(markers, plan.bounds if plan else None)
st.pyplot(fig)
plt.close(fig)

if plan is not None:
    st.subheader("Preview")
    c1, c2 = st.columns(2)
    c1.caption(f"x = {plan.transform.x_fit.slope:.3f} · lng + {plan.transform.x_fit.intercept:.1f}  (R² {plan.transform.x_fit.r2:.3f})")
    c2.caption(f"y = {plan.transform.y_fit.slope:.3f} · lat + {plan.transform.y_fit.intercept:.1f}  (R² {plan.transform.y_fit.r2:.3f})")
    st.dataframe(
        [{"Club": p.club_name, "x": p.x, "y": p.y} for p in plan.positions],
        hide_index=True,
        use_container_width=True,
    )

st.divider()
st.subheader("Edit marker")
if markers:
    marker_id = st.selectbox("Club", [m.id for m in markers], format_func=lambda i: next(m.club_name for m in markers if m.id == i))
    marker = next(m for m in markers if m.id == marker_id)
    c1, c2, c3 = st.columns(3)
    x = c1.number_input("x", min_value=0.0, max_value=float(MAP_WIDTH), value=float(marker.x_position or 0.0), step=1.0)
    y = c2.number_input("y", min_value=0.0, max_value=float(MAP_HEIGHT), value=float(marker.y_position or 0.0), step=1.0)
    c3.caption(f"lat/lng: {marker.latitude}, {marker.longitude}" if marker.has_coordinates else "No coordinates")
    b1, b2, b3 = st.columns(3)
    if b1.button("Move", use_container_width=True):
        try:
            service.move_marker(marker.id, x, y)
        except Exception as e:
            report_failure("Moving marker", e)
        else:
            st.rerun()
    if marker.is_calibration_point:
        if b2.button("Unmark calibration point", use_container_width=True):
            try:
                service.unmark_calibration_point(marker.id)
            except Exception as e:
                report_failure("Unmarking", e)
            else:
                st.rerun()
    elif b2.button("Mark as calibration point", use_container_width=True):
        try:
            service.mark_calibration_point(marker.id)
        except CalibrationError as e:
            notify_error(str(e))
        except Exception as e:
            report_failure("Marking", e)
        else:
            notify_success(f"{marker.club_name} is now a calibration point")
            st.rerun()
    if b3.button("Reset to centre", use_container_width=True):
        try:
            service.reset_marker(marker.id, MAP_WIDTH / 2, MAP_HEIGHT / 2)
        except Exception as e:
            report_failure("Resetting marker", e)
        else:
            st.rerun()

with st.form("add_marker", clear_on_submit=True):
    st.markdown("**Add club**")
    a1, a2, a3 = st.columns(3)
    club_name = a1.text_input("Club name")
    club_country = a2.text_input("Country", value=country or "")
    city = a3.text_input("City")
    if st.form_submit_button("Add"):
        try:
            service.add_marker(club_name, club_country, city)
        except Exception as e:
            report_failure("Adding club", e)
        else:
            st.rerun()
