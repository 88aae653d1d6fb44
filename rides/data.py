from __future__ import annotations

import csv
import io
import logging
import math
import re
import warnings
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import pandas as pd

from rides.config import get_settings
from rides.schema import ColumnRoles, RecordSchema, infer_roles, infer_schema


logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?(?:\.\d+)?\s*([AaPp][Mm])?$")


class DatasetLoadError(RuntimeError):
    """Raised when the source file cannot be read or parsed."""


@dataclass(frozen=True, eq=False)
class Dataset:
    """The session dataset: raw string records plus what was inferred at load."""

    frame: pd.DataFrame
    roles: ColumnRoles
    schema: RecordSchema
    source: Optional[str] = None
    columns: List[str] = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "columns", [str(c) for c in self.frame.columns])

    def __len__(self) -> int:
        return int(len(self.frame))

    @property
    def is_empty(self) -> bool:
        return self.frame.empty


# ---------- parse-with-default helpers ----------
def parse_number(value: object) -> Optional[float]:
    """Return the numeric value, or None for blanks and anything non-numeric."""
    if value is None:
        return None
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        out = float(value)
    else:
        s = str(value).strip()
        if not s:
            return None
        try:
            out = float(s)
        except ValueError:
            return None
    if math.isnan(out) or math.isinf(out):
        return None
    return out


def normalize_date(value: object) -> Optional[str]:
    """Canonical YYYY-MM-DD form of a date-like value, None if it doesn't parse."""
    if value is None:
        return None
    if isinstance(value, (datetime, date)):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, float) and math.isnan(value):
        return None
    s = str(value).strip()
    if not s:
        return None
    try:
        ts = pd.to_datetime(s, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(ts):
        return None
    return ts.strftime("%Y-%m-%d")


def normalize_dates(values: pd.Series) -> pd.Series:
    """Vectorised `normalize_date`; unparseable entries become <NA>."""
    if values.empty:
        return pd.Series([], index=values.index, dtype="string")
    cleaned = values.astype("string").str.strip().replace("", pd.NA)
    try:
        parsed = pd.to_datetime(cleaned, errors="coerce", format="mixed")
        out = parsed.dt.strftime("%Y-%m-%d")
    except (ValueError, TypeError, AttributeError):
        # Mixed tz offsets and the like: fall back to per-value parsing.
        out = cleaned.map(normalize_date, na_action="ignore")
    return out.astype("string")


def parse_hour(value: object) -> Optional[int]:
    """Hour of day (0-23) from a bare clock time or a full timestamp."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.hour
    s = str(value).strip()
    if not s:
        return None
    m = _CLOCK_RE.match(s)
    if m:
        hour = int(m.group(1))
        meridiem = (m.group(4) or "").lower()
        if meridiem:
            if not 1 <= hour <= 12:
                return None
            hour = hour % 12 + (12 if meridiem == "pm" else 0)
        return hour if 0 <= hour <= 23 else None
    try:
        ts = pd.to_datetime(s, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(ts):
        return None
    return int(ts.hour)


def numeric_column(frame: pd.DataFrame, column: Optional[str]) -> pd.Series:
    """Column as floats with NaN for blanks and non-numeric text."""
    if not column or column not in frame.columns:
        return pd.Series([float("nan")] * len(frame), index=frame.index, dtype=float)
    values = frame[column].astype(str).str.strip()
    numbers = pd.to_numeric(values, errors="coerce").astype(float)
    return numbers.replace([float("inf"), float("-inf")], float("nan"))


def round_half_up(value: object, ndigits: int = 0) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    q = Decimal(10) ** -ndigits
    try:
        return float(Decimal(str(value)).quantize(q, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        return None


# ---------- record parser ----------
def _balance_quotes(lines: List[str]) -> List[str]:
    """Rewrite lines with an odd number of quotes as plain comma-split fields.

    Quoted fields never span physical lines, so a stray quote stays inside its
    own record instead of swallowing the rest of the file.
    """
    out: List[str] = []
    repaired = 0
    for line in lines:
        if line.count('"') % 2:
            buf = io.StringIO()
            csv.writer(buf, lineterminator="").writerow(line.split(","))
            line = buf.getvalue()
            repaired += 1
        out.append(line)
    if repaired:
        logger.warning("Read %d line(s) with unbalanced quotes as plain comma-separated fields", repaired)
    return out


def parse_records(text: str, *, quoted: bool = True) -> pd.DataFrame:
    """Parse comma-separated text (one header line) into a frame of string records.

    Header names and values are trimmed, short rows are padded with "" and extra
    trailing fields are dropped. Whitespace-only lines are skipped; a line of
    bare separators is an all-empty record. A repeated header name keeps the
    value of its last column. With ``quoted=False`` every comma splits a
    field, quotes included.
    """
    body = (text or "").lstrip("\ufeff").strip()
    lines = [line for line in body.splitlines() if line.strip()]
    if not lines:
        return pd.DataFrame()
    if quoted:
        lines = _balance_quotes(lines)

    with warnings.catch_warnings():
        warnings.simplefilter("ignore", pd.errors.ParserWarning)
        try:
            raw = pd.read_csv(
                io.StringIO("\n".join(lines)),
                sep=",",
                header=None,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                skipinitialspace=quoted,
                quoting=csv.QUOTE_MINIMAL if quoted else csv.QUOTE_NONE,
                index_col=False,
                engine="python",
                on_bad_lines=lambda bad_line: bad_line,
            )
        except pd.errors.EmptyDataError:
            return pd.DataFrame()

    raw = raw.fillna("").astype(str)
    header = [str(v).strip() for v in raw.iloc[0].tolist()]
    positions: Dict[str, int] = {}
    for idx, name in enumerate(header):
        positions[name] = idx

    frame = raw.iloc[1:, list(positions.values())].copy()
    frame.columns = list(positions.keys())
    for col in frame.columns:
        frame[col] = frame[col].str.strip()
    return frame.reset_index(drop=True)


def to_records(frame: pd.DataFrame) -> List[Dict[str, str]]:
    return frame.to_dict(orient="records")


# ---------- loading ----------
def read_dataset_text(path: PathLike) -> str:
    try:
        return Path(path).read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise DatasetLoadError(f"Could not read dataset file {path}: {exc}") from exc


def build_dataset(frame: pd.DataFrame, *, source: Optional[str] = None) -> Dataset:
    roles = infer_roles(frame.columns)
    schema = infer_schema(frame, roles)
    return Dataset(frame=frame, roles=roles, schema=schema, source=source)


def load_dataset(path: PathLike, *, quoted: bool = True) -> Dataset:
    text = read_dataset_text(path)
    try:
        frame = parse_records(text, quoted=quoted)
    except (pd.errors.ParserError, csv.Error, ValueError) as exc:
        raise DatasetLoadError(f"Could not parse dataset file {path}: {exc}") from exc
    dataset = build_dataset(frame, source=str(path))
    logger.info("Loaded %s: %d rows x %d columns", path, len(dataset), len(dataset.columns))
    return dataset


def file_signature(path: Path) -> Tuple[str, float, int]:
    try:
        stat = path.stat()
    except OSError as exc:
        raise DatasetLoadError(f"Dataset file not found: {path}") from exc
    return str(path.resolve()), stat.st_mtime, stat.st_size


@lru_cache(maxsize=4)
def _load_dashboard_data_cached(file_sig: Tuple[str, float, int], quoted: bool) -> Dataset:
    return load_dataset(file_sig[0], quoted=quoted)


def load_dashboard_data(path: Optional[PathLike] = None) -> Dataset:
    """Load (once per file version) the configured dataset."""
    settings = get_settings()
    source = Path(path) if path is not None else Path(settings.data_path)
    return _load_dashboard_data_cached(file_signature(source), settings.quoted_fields)


def clear_cache() -> None:
    _load_dashboard_data_cached.cache_clear()
