from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


DATA_DIR = Path(__file__).resolve().parents[1] / "data"
DEFAULT_DATA_FILE = "ncr_ride_bookings.csv"


class Settings(BaseSettings):
    """Dashboard settings, overridable through RIDES_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="RIDES_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    data_path: Path = DATA_DIR / DEFAULT_DATA_FILE
    quoted_fields: bool = True

    preview_rows: int = 50
    top_locations: int = 10
    top_vehicle_types: int = 5
    currency_symbol: str = "₹"

    cors_origins: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]
    log_level: str = "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


_logging_configured = False


def configure_logging(level: str | None = None) -> None:
    global _logging_configured
    if _logging_configured:
        return
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    _logging_configured = True
