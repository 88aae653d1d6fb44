from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, List, Mapping, Optional, Tuple

import pandas as pd

from rides.data import normalize_dates, numeric_column, parse_hour, round_half_up


UNKNOWN_LABEL = "Unknown"


@dataclass(frozen=True)
class NumericSummary:
    total: float = 0.0
    mean: float = 0.0
    count: int = 0

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class StatusCounts:
    total: int = 0
    completed: int = 0
    cancelled: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


def _text(frame: pd.DataFrame, column: Optional[str]) -> pd.Series:
    if not column or column not in frame.columns:
        return pd.Series([""] * len(frame), index=frame.index, dtype="string")
    return frame[column].astype("string").fillna("").str.strip()


def count_by_value(frame: pd.DataFrame, column: Optional[str], *, label_missing: bool = True) -> Dict[str, int]:
    """Occurrences of each distinct value, keyed in first-seen order.

    Blank values are counted under "Unknown" when `label_missing` is set and
    skipped otherwise.
    """
    values = _text(frame, column)
    if label_missing:
        values = values.mask(values == "", UNKNOWN_LABEL)
    else:
        values = values[values != ""]
    if values.empty:
        return {}
    counts = values.groupby(values, sort=False).size()
    return {str(k): int(v) for k, v in counts.items()}


def top_n(counts: Mapping[str, int], n: int) -> List[Tuple[str, int]]:
    """Largest `n` groups by count; ties keep first-seen order."""
    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
    return ranked[: max(0, int(n))]


def time_series(frame: pd.DataFrame, date_column: Optional[str]) -> List[Tuple[str, int]]:
    """Bookings per day, ascending by YYYY-MM-DD. Unparseable dates are skipped."""
    if not date_column or date_column not in frame.columns or frame.empty:
        return []
    days = normalize_dates(frame[date_column]).dropna()
    if days.empty:
        return []
    counts = days.groupby(days, sort=True).size()
    return [(str(k), int(v)) for k, v in counts.items()]


def numeric_summary(frame: pd.DataFrame, column: Optional[str], *, skip_missing: bool = False) -> NumericSummary:
    values = numeric_column(frame, column)
    if skip_missing:
        values = values.dropna()
    else:
        values = values.fillna(0.0)
    count = int(len(values))
    total = float(values.sum()) if count else 0.0
    return NumericSummary(total=total, mean=total / max(count, 1), count=count)


def hour_histogram(frame: pd.DataFrame, time_column: Optional[str]) -> List[int]:
    """24 buckets of bookings per hour of day; unparseable times are skipped."""
    buckets = [0] * 24
    if not time_column or time_column not in frame.columns:
        return buckets
    for value in frame[time_column].tolist():
        hour = parse_hour(value)
        if hour is not None:
            buckets[hour] += 1
    return buckets


def rating_histogram(frame: pd.DataFrame, rating_column: Optional[str], *, include_zero: bool = False) -> Dict[int, int]:
    """Bookings per rating rounded half-up, ascending by rating.

    A rating that rounds to 0 is treated like a missing one unless
    `include_zero` is set.
    """
    counts: Dict[int, int] = {}
    for value in numeric_column(frame, rating_column).tolist():
        rounded = round_half_up(value)
        if rounded is None:
            continue
        star = int(rounded)
        if star == 0 and not include_zero:
            continue
        counts[star] = counts.get(star, 0) + 1
    return dict(sorted(counts.items()))


def status_counts(frame: pd.DataFrame, status_column: Optional[str]) -> StatusCounts:
    status = _text(frame, status_column).str.lower()
    return StatusCounts(
        total=int(len(frame)),
        completed=int((status == "completed").sum()),
        cancelled=int(status.str.contains("cancel", regex=False).sum()),
    )
