"""
app/config.py

Application-level configuration helpers.

Every setting is read from the process environment, after optional
`.env` / `.env.local` files in the project root have been loaded.
Values that fail to parse fall back to their defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

_PROJECT_ROOT = Path(__file__).resolve().parents[1]


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    for filename in (".env", ".env.local"):
        env_path = _PROJECT_ROOT / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading settings.
    """

    load_env_files()


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


@dataclass(frozen=True)
class IngestionSettings:
    """
    Runtime settings for reading and parsing sales exports.
    """

    encoding: str = "utf-8-sig"
    delimiter: str = ","
    max_workers: int = 4


@dataclass(frozen=True)
class AlertSettings:
    """
    Thresholds for the alert rules.

    ``low_margin_threshold`` is a percentage (10.0 means 10 %).
    """

    low_margin_threshold: float = 10.0
    unpaid_max_age_months: int = 6
    unpaid_status: str = "Unpaid"


@dataclass(frozen=True)
class InsightSettings:
    """
    Thresholds for the insight rules.

    Ratios are decimal fractions (0.15 means 15 %).
    """

    average_margin_threshold: float = 0.15
    low_margin_ratio: float = 0.10
    low_margin_min_count: int = 5


@lru_cache(maxsize=1)
def get_ingestion_settings() -> IngestionSettings:
    """
    Return cached ingestion settings from environment variables.
    """

    delimiter = _get_str_env("SALES_INGEST_DELIMITER", ",")
    return IngestionSettings(
        encoding=_get_str_env("SALES_INGEST_ENCODING", "utf-8-sig"),
        delimiter=delimiter[0],
        max_workers=max(1, _get_int_env("SALES_INGEST_MAX_WORKERS", 4)),
    )


@lru_cache(maxsize=1)
def get_alert_settings() -> AlertSettings:
    """
    Return cached alert rule settings from environment variables.
    """

    return AlertSettings(
        low_margin_threshold=_get_float_env("SALES_LOW_MARGIN_THRESHOLD", 10.0),
        unpaid_max_age_months=max(0, _get_int_env("SALES_UNPAID_MAX_AGE_MONTHS", 6)),
        unpaid_status=_get_str_env("SALES_UNPAID_STATUS", "Unpaid"),
    )


@lru_cache(maxsize=1)
def get_insight_settings() -> InsightSettings:
    """
    Return cached insight rule settings from environment variables.
    """

    return InsightSettings(
        average_margin_threshold=_get_float_env("SALES_INSIGHT_AVG_MARGIN_THRESHOLD", 0.15),
        low_margin_ratio=_get_float_env("SALES_INSIGHT_LOW_MARGIN_RATIO", 0.10),
        low_margin_min_count=max(0, _get_int_env("SALES_INSIGHT_LOW_MARGIN_MIN_COUNT", 5)),
    )


@lru_cache(maxsize=1)
def get_department_rules_path() -> Path | None:
    """
    Return the optional JSON file overriding department keyword rules.
    """

    raw = _get_optional_str_env("SALES_DEPARTMENT_RULES_PATH")
    if raw is None:
        return None
    path = Path(raw)
    return path if path.is_absolute() else _PROJECT_ROOT / path
