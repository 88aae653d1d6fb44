from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

import pandas as pd

from rides.data import numeric_column, parse_number


NO_DATA_MESSAGE = "No data available"

Pairs = Union[Mapping[Any, Any], Iterable[Tuple[Any, Any]]]


@dataclass(frozen=True)
class ChartSeries:
    labels: List[str] = field(default_factory=list)
    values: List[float] = field(default_factory=list)

    def to_dict(self) -> Dict[str, List[Any]]:
        return asdict(self)

    def __len__(self) -> int:
        return len(self.labels)


def to_series(data: Pairs) -> ChartSeries:
    items = data.items() if isinstance(data, Mapping) else data
    labels: List[str] = []
    values: List[float] = []
    for label, value in items:
        labels.append(str(label))
        values.append(value)
    return ChartSeries(labels=labels, values=values)


def hour_series(buckets: List[int]) -> ChartSeries:
    return ChartSeries(labels=[f"{h:02d}:00" for h in range(len(buckets))], values=list(buckets))


def scatter_points(frame: pd.DataFrame, x_column: Optional[str], y_column: Optional[str]) -> List[Dict[str, float]]:
    """x/y pairs for rows where both values are present and non-zero."""
    if frame.empty or not x_column or not y_column:
        return []
    xs = numeric_column(frame, x_column)
    ys = numeric_column(frame, y_column)
    keep = xs.notna() & ys.notna() & (xs != 0) & (ys != 0)
    return [{"x": float(x), "y": float(y)} for x, y in zip(xs[keep].tolist(), ys[keep].tolist())]


def format_fixed2(value: object) -> str:
    num = parse_number(value)
    if num is None:
        return "N/A"
    return f"{num:.2f}"


def format_count(value: object) -> str:
    num = parse_number(value)
    if num is None:
        return "N/A"
    return f"{int(num):,}"


def format_currency(value: object, symbol: str = "₹", decimals: int = 2) -> str:
    num = parse_number(value)
    if num is None:
        return "N/A"
    sign = "-" if num < 0 else ""
    return f"{sign}{symbol}{abs(num):,.{decimals}f}"


def table_preview(frame: pd.DataFrame, limit: int = 50) -> Dict[str, Any]:
    if frame.empty:
        return {"empty": True, "message": NO_DATA_MESSAGE, "columns": [str(c) for c in frame.columns], "rows": [], "total_rows": 0, "truncated": False}
    limit = max(1, int(limit))
    head = frame.head(limit)
    return {
        "empty": False,
        "columns": [str(c) for c in frame.columns],
        "rows": head.astype(str).values.tolist(),
        "total_rows": int(len(frame)),
        "truncated": len(frame) > limit,
    }
