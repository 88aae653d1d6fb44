from __future__ import annotations

import logging
import math
from typing import Optional

import numpy as np
import pandas as pd
from fastapi import FastAPI, Query
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from api.schemas import FilterCriteriaModel, MetaColumnsResponse, MetaListResponse
from rides.config import configure_logging, get_settings
from rides.data import load_dashboard_data
from rides.filters import FilterCriteria, apply_filters, category_options, normalize_filters
from rides.metrics_overview import compute_overview
from rides.presentation import table_preview


configure_logging()
app = FastAPI(title="Ride Bookings Dashboard API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _criteria_from_model(model: Optional[FilterCriteriaModel]) -> FilterCriteria:
    return normalize_filters(model.model_dump() if model is not None else {})


def _error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
                pd.Timestamp: lambda ts: ts.isoformat(),
            },
        )
    )


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/meta/columns")
def meta_columns():
    try:
        dataset = load_dashboard_data()
        payload = MetaColumnsResponse(
            columns=dataset.columns,
            roles=dataset.roles.to_dict(),
            schema_kinds=dataset.schema.to_dict(),
            row_count=len(dataset),
        )
        return _json(payload.model_dump())
    except Exception as exc:
        logger.exception("meta_columns failed")
        return _error(exc)


@app.get("/meta/categories")
def meta_categories():
    try:
        dataset = load_dashboard_data()
        values = category_options(dataset.frame, dataset.roles)
        return _json(MetaListResponse(values=values).model_dump())
    except Exception as exc:
        logger.exception("meta_categories failed")
        return _error(exc)


@app.post("/overview")
def overview(filters: Optional[FilterCriteriaModel] = None):
    try:
        dataset = load_dashboard_data()
        return _json(compute_overview(dataset, _criteria_from_model(filters)))
    except Exception as exc:
        logger.exception("overview failed")
        return _error(exc)


@app.post("/preview")
def preview(filters: Optional[FilterCriteriaModel] = None, limit: Optional[int] = Query(default=None, ge=1, le=1000)):
    try:
        dataset = load_dashboard_data()
        filtered = apply_filters(dataset.frame, dataset.roles, _criteria_from_model(filters))
        return _json(table_preview(filtered, limit or get_settings().preview_rows))
    except Exception as exc:
        logger.exception("preview failed")
        return _error(exc)


@app.post("/export")
def export(filters: Optional[FilterCriteriaModel] = None):
    try:
        dataset = load_dashboard_data()
        filtered = apply_filters(dataset.frame, dataset.roles, _criteria_from_model(filters))
    except Exception as exc:
        logger.exception("export failed")
        return _error(exc)
    csv_bytes = filtered.to_csv(index=False).encode("utf-8")
    return Response(
        content=csv_bytes,
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=ride_bookings.csv"},
    )
