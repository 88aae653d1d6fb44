from __future__ import annotations

from dataclasses import asdict
import logging
from typing import Any, Dict, Optional

import pandas as pd

from rides.aggregations import (
    count_by_value,
    hour_histogram,
    numeric_summary,
    rating_histogram,
    status_counts,
    time_series,
    top_n,
)
from rides.charts import bar_chart, line_chart, pie_chart, scatter_chart, to_vega_spec
from rides.config import get_settings
from rides.data import Dataset
from rides.filters import FilterCriteria, apply_filters
from rides.presentation import (
    NO_DATA_MESSAGE,
    ChartSeries,
    format_count,
    format_currency,
    format_fixed2,
    hour_series,
    scatter_points,
    table_preview,
    to_series,
)


logger = logging.getLogger(__name__)


def _kpis(frame: pd.DataFrame, dataset: Dataset, currency_symbol: str) -> Dict[str, Any]:
    roles = dataset.roles
    statuses = status_counts(frame, roles.status)
    value = numeric_summary(frame, roles.value)
    rating = numeric_summary(frame, roles.rating)
    distance = numeric_summary(frame, roles.distance)
    return {
        "total_bookings": statuses.total,
        "completed": statuses.completed,
        "cancelled": statuses.cancelled,
        "total_value": value.total,
        "avg_value": value.mean,
        "avg_rating": rating.mean,
        "avg_distance": distance.mean,
        "formatted": {
            "total_bookings": format_count(statuses.total),
            "completed": format_count(statuses.completed),
            "cancelled": format_count(statuses.cancelled),
            "total_value": format_currency(value.total, currency_symbol),
            "avg_value": format_currency(value.mean, currency_symbol),
            "avg_rating": format_fixed2(rating.mean),
            "avg_distance": format_fixed2(distance.mean),
        },
    }


def _series(frame: pd.DataFrame, dataset: Dataset, *, top_locations: int, top_vehicle_types: int) -> Dict[str, Any]:
    roles = dataset.roles
    series: Dict[str, Any] = {
        "daily": to_series(time_series(frame, roles.date)),
        "top_locations": to_series(top_n(count_by_value(frame, roles.category), top_locations)),
        "vehicle_types": to_series(count_by_value(frame, roles.vehicle_type)),
        "top_vehicle_types": to_series(top_n(count_by_value(frame, roles.vehicle_type), top_vehicle_types)),
        "status": to_series(count_by_value(frame, roles.status)) if roles.status else ChartSeries(),
        "hours": hour_series(hour_histogram(frame, roles.time)) if roles.time else ChartSeries(),
        "ratings": to_series(rating_histogram(frame, roles.rating)) if roles.rating else ChartSeries(),
    }
    series["distance_vs_value"] = scatter_points(frame, roles.distance, roles.value)
    return series


def _charts(series: Dict[str, Any]) -> Dict[str, Any]:
    charts: Dict[str, Any] = {}
    if len(series["daily"]):
        charts["daily_bookings"] = to_vega_spec(line_chart(series["daily"], title="Bookings", x_title="Date"))
    if len(series["top_locations"]):
        charts["top_locations"] = to_vega_spec(bar_chart(series["top_locations"], x_title="Pickup Location"))
    if len(series["vehicle_types"]):
        charts["vehicle_types"] = to_vega_spec(pie_chart(series["vehicle_types"], title="Vehicle Type"))
    if len(series["top_vehicle_types"]):
        charts["top_vehicle_types"] = to_vega_spec(bar_chart(series["top_vehicle_types"], x_title="Vehicle Type"))
    if len(series["status"]):
        charts["booking_status"] = to_vega_spec(pie_chart(series["status"], title="Booking Status", doughnut=True))
    if len(series["hours"]) and any(series["hours"].values):
        charts["bookings_by_hour"] = to_vega_spec(bar_chart(series["hours"], x_title="Hour of Day"))
    if len(series["ratings"]):
        charts["rating_distribution"] = to_vega_spec(bar_chart(series["ratings"], x_title="Driver Rating"))
    if series["distance_vs_value"]:
        charts["distance_vs_value"] = to_vega_spec(scatter_chart(series["distance_vs_value"]))
    return charts


def compute_overview(dataset: Dataset, criteria: FilterCriteria, *, preview_rows: Optional[int] = None) -> Dict[str, Any]:
    settings = get_settings()
    preview_rows = preview_rows or settings.preview_rows

    filtered = apply_filters(dataset.frame, dataset.roles, criteria)
    row_counts = {"total": len(dataset), "filtered": int(len(filtered))}
    kpis = _kpis(filtered, dataset, settings.currency_symbol)

    if filtered.empty:
        logger.info("No rows match filters %s", criteria)
        return {
            "empty": True,
            "message": NO_DATA_MESSAGE,
            "filters": asdict(criteria),
            "row_counts": row_counts,
            "kpis": kpis,
            "series": {},
            "charts": {},
            "table": table_preview(filtered, preview_rows),
        }

    series = _series(
        filtered,
        dataset,
        top_locations=settings.top_locations,
        top_vehicle_types=settings.top_vehicle_types,
    )
    return {
        "empty": False,
        "filters": asdict(criteria),
        "row_counts": row_counts,
        "kpis": kpis,
        "series": {k: (v.to_dict() if isinstance(v, ChartSeries) else v) for k, v in series.items()},
        "charts": _charts(series),
        "table": table_preview(filtered, preview_rows),
    }
