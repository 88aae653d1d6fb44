from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

import pandas as pd

from rides.data import normalize_date, normalize_dates
from rides.schema import ColumnRoles


ALL_SENTINELS = {"all", "__all__"}


@dataclass(frozen=True)
class FilterCriteria:
    date_from: Optional[str] = None
    date_to: Optional[str] = None
    category: Optional[str] = None

    @property
    def category_active(self) -> bool:
        return self.category is not None and self.category not in ALL_SENTINELS

    @property
    def is_active(self) -> bool:
        return bool(self.date_from or self.date_to or self.category_active)


DEFAULT_FILTERS = FilterCriteria()


def _as_category(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value)
    if not s.strip() or s in ALL_SENTINELS:
        return None
    return s


def normalize_filters(raw: Optional[Mapping[str, Any]]) -> FilterCriteria:
    """Build criteria from user input; bounds that don't parse are ignored."""
    raw = raw or {}
    return FilterCriteria(
        date_from=normalize_date(raw.get("date_from")),
        date_to=normalize_date(raw.get("date_to")),
        category=_as_category(raw.get("category")),
    )


def apply_filters(frame: pd.DataFrame, roles: ColumnRoles, criteria: FilterCriteria) -> pd.DataFrame:
    """Rows matching every active constraint, in input order.

    With nothing active the input frame itself is returned. Rows whose date
    doesn't parse never satisfy a date bound.
    """
    if not criteria.is_active or frame.empty:
        return frame

    mask = pd.Series(True, index=frame.index)
    if (criteria.date_from or criteria.date_to) and roles.date in frame.columns:
        days = normalize_dates(frame[roles.date])
        if criteria.date_from:
            mask &= (days >= criteria.date_from).fillna(False).astype(bool)
        if criteria.date_to:
            mask &= (days <= criteria.date_to).fillna(False).astype(bool)
    if criteria.category_active and roles.category in frame.columns:
        mask &= frame[roles.category] == criteria.category
    return frame[mask]


def category_options(frame: pd.DataFrame, roles: ColumnRoles) -> List[str]:
    if frame.empty or not roles.category or roles.category not in frame.columns:
        return []
    return sorted(str(v) for v in frame[roles.category].unique().tolist())
