"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project env files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


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


@dataclass(frozen=True)
class CSVIngestionSettings:
    """
    Runtime settings for CSV ingestion.
    """

    batch_size: int = 1000
    error_log_path: str = "error_log.txt"
    max_captured_errors: int = 500
    log_row_errors: bool = True
    report_age_distribution: bool = True


@dataclass(frozen=True)
class DatabaseSchemaSettings:
    """
    Startup schema behaviour.
    """

    auto_create_schema: bool = False


@lru_cache(maxsize=1)
def get_csv_ingestion_settings() -> CSVIngestionSettings:
    """
    Return cached CSV ingestion settings from environment variables.
    """

    return CSVIngestionSettings(
        batch_size=max(1, _get_int_env("CSV_INGEST_BATCH_SIZE", 1000)),
        error_log_path=_get_str_env("CSV_INGEST_ERROR_LOG_PATH", "error_log.txt"),
        max_captured_errors=max(1, _get_int_env("CSV_INGEST_MAX_CAPTURED_ERRORS", 500)),
        log_row_errors=_get_bool_env("CSV_INGEST_LOG_ROW_ERRORS", True),
        report_age_distribution=_get_bool_env("CSV_INGEST_REPORT_AGE_DISTRIBUTION", True),
    )


@lru_cache(maxsize=1)
def get_database_schema_settings() -> DatabaseSchemaSettings:
    return DatabaseSchemaSettings(
        auto_create_schema=_get_bool_env("DB_AUTO_CREATE_SCHEMA", False),
    )
