from __future__ import annotations

from typing import Any, Dict, List, Optional

import altair as alt
import pandas as pd

from rides.presentation import ChartSeries

alt.data_transformers.disable_max_rows()

LINE_COLOR = "#2563eb"
BAR_COLOR = "#1e40af"
AXIS_COLOR = "#1e3a8a"
PIE_COLORS = ["#1e3a8a", "#2563eb", "#3b82f6", "#60a5fa", "#93c5fd"]


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def _frame(series: ChartSeries) -> pd.DataFrame:
    return pd.DataFrame({"label": series.labels, "value": series.values})


def _axis() -> alt.Axis:
    return alt.Axis(labelColor=AXIS_COLOR, titleColor=AXIS_COLOR, gridDash=[4, 4], domain=False, ticks=False)


def line_chart(series: ChartSeries, *, title: str = "Bookings", x_title: str = "Date", height: int = 260) -> alt.Chart:
    return (
        alt.Chart(_frame(series))
        .mark_line(color=LINE_COLOR, interpolate="monotone", point={"filled": True, "size": 30})
        .encode(
            x=alt.X("label:O", title=x_title, sort=None, axis=_axis()),
            y=alt.Y("value:Q", title=title, scale=alt.Scale(zero=True), axis=_axis()),
            tooltip=[alt.Tooltip("label:O", title=x_title), alt.Tooltip("value:Q", title=title, format=",")],
        )
        .properties(height=height)
    )


def bar_chart(
    series: ChartSeries,
    *,
    title: str = "Bookings",
    x_title: str = "",
    color: str = BAR_COLOR,
    height: int = 260,
) -> alt.Chart:
    return (
        alt.Chart(_frame(series))
        .mark_bar(color=color)
        .encode(
            x=alt.X("label:N", title=x_title, sort=None, axis=_axis()),
            y=alt.Y("value:Q", title=title, scale=alt.Scale(zero=True), axis=_axis()),
            tooltip=[alt.Tooltip("label:N", title=x_title or "Label"), alt.Tooltip("value:Q", title=title, format=",")],
        )
        .properties(height=height)
    )


def pie_chart(series: ChartSeries, *, title: str = "Share", doughnut: bool = False, colors: Optional[List[str]] = None, height: int = 260) -> alt.Chart:
    palette = colors or PIE_COLORS
    return (
        alt.Chart(_frame(series))
        .mark_arc(innerRadius=60 if doughnut else 0)
        .encode(
            theta=alt.Theta("value:Q", stack=True),
            color=alt.Color(
                "label:N",
                title=title,
                sort=None,
                scale=alt.Scale(range=palette),
                legend=alt.Legend(orient="bottom"),
            ),
            tooltip=[alt.Tooltip("label:N", title=title), alt.Tooltip("value:Q", title="Bookings", format=",")],
        )
        .properties(height=height)
    )


def scatter_chart(points: List[Dict[str, float]], *, x_title: str = "Ride Distance", y_title: str = "Booking Value", height: int = 260) -> alt.Chart:
    data = pd.DataFrame(points, columns=["x", "y"])
    return (
        alt.Chart(data)
        .mark_circle(color=LINE_COLOR, opacity=0.5, size=30)
        .encode(
            x=alt.X("x:Q", title=x_title, axis=_axis()),
            y=alt.Y("y:Q", title=y_title, axis=_axis()),
            tooltip=[alt.Tooltip("x:Q", title=x_title, format=",.2f"), alt.Tooltip("y:Q", title=y_title, format=",.2f")],
        )
        .properties(height=height)
    )
