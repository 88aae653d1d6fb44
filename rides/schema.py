from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence

import pandas as pd


class ValueKind(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"


class Role(str, Enum):
    DATE = "date"
    CATEGORY = "category"
    TYPE = "type"
    OTHER = "other"


DATE_TOKENS = ("date",)
CATEGORY_TOKENS = ("barangay", "location")
TYPE_TOKENS = ("type",)


@dataclass(frozen=True)
class ColumnRoles:
    """Which columns drive filtering and aggregation.

    `date`, `category` and `vehicle_type` fall back to the first three columns
    when no header matches. The metric roles are optional and stay None when
    the dataset has no matching header.
    """

    date: Optional[str] = None
    category: Optional[str] = None
    vehicle_type: Optional[str] = None
    status: Optional[str] = None
    time: Optional[str] = None
    value: Optional[str] = None
    distance: Optional[str] = None
    rating: Optional[str] = None

    def role_of(self, column: str) -> Role:
        if column == self.date:
            return Role.DATE
        if column == self.category:
            return Role.CATEGORY
        if column == self.vehicle_type:
            return Role.TYPE
        return Role.OTHER

    def to_dict(self) -> Dict[str, Optional[str]]:
        return asdict(self)


def _find(columns: Sequence[str], tokens: Iterable[str], *, exclude: Iterable[Optional[str]] = ()) -> Optional[str]:
    lowered = [t.lower() for t in tokens]
    skip = {c for c in exclude if c}
    for col in columns:
        if col in skip:
            continue
        name = col.lower()
        if any(t in name for t in lowered):
            return col
    return None


def _positional(columns: Sequence[str], idx: int) -> Optional[str]:
    return columns[idx] if len(columns) > idx else None


def _find_rating(columns: Sequence[str]) -> Optional[str]:
    for col in columns:
        name = col.lower()
        if "driver" in name and "rating" in name:
            return col
    return _find(columns, ["rating"])


def infer_roles(columns: Iterable[str]) -> ColumnRoles:
    cols = [str(c) for c in columns]
    date_col = _find(cols, DATE_TOKENS) or _positional(cols, 0)
    return ColumnRoles(
        date=date_col,
        category=_find(cols, CATEGORY_TOKENS) or _positional(cols, 1),
        vehicle_type=_find(cols, TYPE_TOKENS) or _positional(cols, 2),
        status=_find(cols, ["status"]),
        time=_find(cols, ["time"], exclude=[date_col]),
        value=_find(cols, ["value", "fare", "amount"]),
        distance=_find(cols, ["distance"]),
        rating=_find_rating(cols),
    )


@dataclass(frozen=True)
class RecordSchema:
    kinds: Dict[str, ValueKind]

    def kind(self, column: str) -> ValueKind:
        return self.kinds.get(column, ValueKind.TEXT)

    def columns_of(self, kind: ValueKind) -> List[str]:
        return [c for c, k in self.kinds.items() if k is kind]

    def to_dict(self) -> Dict[str, str]:
        return {c: k.value for c, k in self.kinds.items()}


NULL_TOKENS = {"", "null", "none", "nan", "na", "n/a", "<na>"}


def _is_numeric_column(series: pd.Series) -> bool:
    values = series.astype("string").str.strip().fillna("")
    present = values[~values.str.lower().isin(NULL_TOKENS)]
    if present.empty:
        return False
    parsed = pd.to_numeric(present, errors="coerce")
    return bool(parsed.notna().all())


def infer_schema(frame: pd.DataFrame, roles: ColumnRoles) -> RecordSchema:
    kinds: Dict[str, ValueKind] = {}
    for col in frame.columns:
        col = str(col)
        if col == roles.date or "date" in col.lower():
            kinds[col] = ValueKind.DATE
        elif _is_numeric_column(frame[col]):
            kinds[col] = ValueKind.NUMBER
        else:
            kinds[col] = ValueKind.TEXT
    return RecordSchema(kinds=kinds)
