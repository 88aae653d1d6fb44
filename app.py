from contextlib import contextmanager
from typing import Any, Dict, Optional

import altair as alt
import pandas as pd
import streamlit as st

from rides.charts import bar_chart, line_chart, pie_chart, scatter_chart
from rides.config import configure_logging, get_settings
from rides.data import DatasetLoadError, load_dashboard_data
from rides.filters import apply_filters
from rides.presentation import NO_DATA_MESSAGE, ChartSeries
from rides.state import DashboardState

alt.data_transformers.disable_max_rows()
configure_logging()

ALL_OPTION = "__all__"


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .app-top-bar {padding: 6px 0 4px;border-bottom: 1px solid #e5e7eb;margin-bottom: 10px;}
        .app-top-bar .breadcrumb {color: #6b7280;font-size: 0.9rem;margin-bottom: 2px;}
        .app-top-bar .page-title {font-size: 1.4rem;font-weight: 700;color: #1e3a8a;}
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #1e3a8a;margin-bottom: 8px;}
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}
        .chip {background: #eff6ff;border: 1px solid #dbeafe;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #1e40af;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(f"<div class='card'><div class='card-title'>{title}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def format_filter_summary(filters: Dict[str, Any]) -> str:
    date_from, date_to = filters.get("date_from"), filters.get("date_to")
    if date_from or date_to:
        date_chip = f"Dates: {date_from or '…'} – {date_to or '…'}"
    else:
        date_chip = "Dates: All"
    category_chip = f"Location: {filters.get('category') or 'All'}"
    return "".join([f"<span class='chip'>{txt}</span>" for txt in [date_chip, category_chip]])


def render_page_header(title: str, breadcrumb: str, filter_summary_html: str, export_df: Optional[pd.DataFrame] = None):
    c1, c2 = st.columns([8, 2])
    with c1:
        st.markdown(
            f"<div class='app-top-bar'><div class='breadcrumb'>{breadcrumb}</div><div class='page-title'>{title}</div></div>",
            unsafe_allow_html=True,
        )
    with c2:
        if export_df is not None and not export_df.empty:
            st.download_button(
                "Export CSV",
                data=export_df.to_csv(index=False).encode("utf-8"),
                file_name="ride_bookings.csv",
                mime="text/csv",
            )
    st.markdown(f"<div class='chip-row'>{filter_summary_html}</div>", unsafe_allow_html=True)


def _series(payload: Dict[str, Any], key: str) -> ChartSeries:
    raw = payload.get("series", {}).get(key) or {}
    return ChartSeries(labels=raw.get("labels", []), values=raw.get("values", []))


def draw_chart(state: DashboardState, slot: str, chart: alt.Chart):
    placeholder = st.empty()
    state.replace_chart(slot, placeholder)
    placeholder.altair_chart(chart, use_container_width=True)


# ---------- UI setup ----------
st.set_page_config(page_title="Ride Bookings Dashboard", layout="wide")
inject_base_styles()
st.title("Ride Bookings Dashboard")
st.caption("Bookings, cancellations and ride quality for the selected dates and pickup location.")

settings = get_settings()
try:
    dataset = load_dashboard_data()
except DatasetLoadError as exc:
    st.error(f"Could not load the bookings dataset: {exc}")
    st.stop()

if dataset.is_empty:
    st.error(f"No bookings found in {dataset.source}.")
    st.stop()

state: Optional[DashboardState] = st.session_state.get("dashboard_state")
if state is None:
    state = DashboardState(dataset=dataset)
    st.session_state["dashboard_state"] = state
elif state.dataset is not dataset:
    state.replace_dataset(dataset)

# Chart elements from the previous run are gone once Streamlit reruns the script.
state.forget_charts()


def reset_filters():
    st.session_state["date_from"] = None
    st.session_state["date_to"] = None
    st.session_state["category"] = ALL_OPTION
    st.session_state["applied_filters"] = {}


# ----- Sidebar: filters -----
st.session_state.setdefault("date_from", None)
st.session_state.setdefault("date_to", None)
st.session_state.setdefault("category", ALL_OPTION)

with st.sidebar:
    st.markdown("### Filters")
    with st.form("filters"):
        date_from = st.date_input("Date from", key="date_from")
        date_to = st.date_input("Date to", key="date_to")
        category = st.selectbox(
            dataset.roles.category or "Location",
            options=[ALL_OPTION] + state.categories,
            format_func=lambda v: "All" if v == ALL_OPTION else v,
            key="category",
        )
        applied = st.form_submit_button("Apply")
    st.button("Reset", on_click=reset_filters)

if applied:
    st.session_state["applied_filters"] = {
        "date_from": date_from.isoformat() if date_from else None,
        "date_to": date_to.isoformat() if date_to else None,
        "category": None if category == ALL_OPTION else category,
    }

raw_filters = st.session_state.get("applied_filters", {})
payload = state.apply(raw_filters, preview_rows=settings.preview_rows)


def render_kpi_tiles(kpis: Dict[str, Any]):
    fmt = kpis["formatted"]
    cols = st.columns(4)
    cols[0].metric("Total Bookings", fmt["total_bookings"])
    cols[1].metric("Completed", fmt["completed"])
    cols[2].metric("Cancelled", fmt["cancelled"])
    cols[3].metric("Total Booking Value", fmt["total_value"])
    cols = st.columns(3)
    cols[0].metric("Avg Booking Value", fmt["avg_value"])
    cols[1].metric("Avg Driver Rating", fmt["avg_rating"], help="Missing ratings count as 0.")
    cols[2].metric("Avg Ride Distance", fmt["avg_distance"])


def render_overview_page():
    filtered = apply_filters(state.dataset.frame, state.dataset.roles, state.criteria)
    render_page_header("Overview", "Home / Overview", format_filter_summary(raw_filters), export_df=filtered)

    with card("KPI Tiles"):
        render_kpi_tiles(payload["kpis"])

    if payload["empty"]:
        state.release_all()
        st.info(NO_DATA_MESSAGE)
        return

    row = st.columns(2)
    with row[0]:
        with card("Daily Bookings"):
            draw_chart(state, "line", line_chart(_series(payload, "daily"), x_title="Date"))
    with row[1]:
        with card("Top Pickup Locations"):
            draw_chart(state, "bar", bar_chart(_series(payload, "top_locations"), x_title="Pickup Location"))

    row = st.columns(2)
    with row[0]:
        with card("Vehicle Types"):
            draw_chart(state, "pie", pie_chart(_series(payload, "vehicle_types"), title="Vehicle Type"))
    with row[1]:
        with card("Booking Status"):
            status = _series(payload, "status")
            if len(status):
                draw_chart(state, "status", pie_chart(status, title="Booking Status", doughnut=True))
            else:
                st.info("No booking status column found.")

    row = st.columns(2)
    with row[0]:
        with card("Bookings by Hour"):
            hours = _series(payload, "hours")
            if len(hours) and any(hours.values):
                draw_chart(state, "hours", bar_chart(hours, x_title="Hour of Day"))
            else:
                st.info("No booking times could be read.")
    with row[1]:
        with card("Driver Ratings"):
            ratings = _series(payload, "ratings")
            if len(ratings):
                draw_chart(state, "ratings", bar_chart(ratings, x_title="Driver Rating"))
            else:
                st.info("No driver ratings available.")

    with card("Ride Distance vs Booking Value"):
        points = payload["series"].get("distance_vs_value") or []
        if points:
            draw_chart(state, "scatter", scatter_chart(points))
        else:
            st.info("No rides with both a distance and a booking value.")

    table = payload["table"]
    with card(f"Bookings (first {len(table['rows'])} of {table['total_rows']:,})"):
        st.dataframe(pd.DataFrame(table["rows"], columns=table["columns"]), hide_index=True, use_container_width=True)


render_overview_page()
