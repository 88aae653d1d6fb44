from __future__ import annotations

import pytest

from rides.config import get_settings
from rides.data import build_dataset, clear_cache, parse_records


RIDES_CSV = """Date,Time,Booking Status,Vehicle Type,Pickup Location,Booking Value,Ride Distance,Driver Ratings
2024-01-01,08:15:00,Completed,Auto,Rohini,100,5.0,4.6
2024-01-01,09:30:00,Cancelled by Driver,Bike,Saket,null,null,null
2024-01-02,08:45:00,Completed,Auto,Rohini,300,12.5,4.4
2024-01-03,garbage,Completed,Go Mini,Vaishali,200,0,0
2024-01-05,22:05:00,Cancelled by Customer,Auto,Saket,,,
pending,23:59:59,Completed,Bike,Rohini,50,2.0,5
"""


@pytest.fixture(autouse=True)
def _fresh_caches():
    get_settings.cache_clear()
    clear_cache()
    yield
    get_settings.cache_clear()
    clear_cache()


@pytest.fixture
def rides_frame():
    return parse_records(RIDES_CSV)


@pytest.fixture
def rides_dataset(rides_frame):
    return build_dataset(rides_frame, source="memory")


@pytest.fixture
def rides_file(tmp_path, monkeypatch):
    path = tmp_path / "rides.csv"
    path.write_text(RIDES_CSV, encoding="utf-8")
    monkeypatch.setenv("RIDES_DATA_PATH", str(path))
    get_settings.cache_clear()
    return path
