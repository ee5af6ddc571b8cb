"""
Shared environment-driven database configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

_ENV_FILENAMES = (".env", ".env.local", "config.env")


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env`, `.env.local` and `config.env` (if present).
    Existing process environment variables are not overwritten.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in _ENV_FILENAMES:
        env_path = project_root / filename
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


def normalize_postgres_url(url: str) -> str:
    """
    Normalize postgres URLs to SQLAlchemy's recommended psycopg driver form.
    """

    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


def _env_or_default(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def build_url_from_parts() -> str:
    """
    Compose a PostgreSQL URL from the discrete DB_* variables.
    """

    host = _env_or_default("DB_HOST", "localhost")
    port = _env_or_default("DB_PORT", "5432")
    name = _env_or_default("DB_NAME", "csv_converter")
    user = _env_or_default("DB_USER", "postgres")
    password = os.getenv("DB_PASSWORD", "")

    credentials = f"{user}:{password}" if password else user
    return f"postgresql+psycopg://{credentials}@{host}:{port}/{name}"


def resolve_database_url() -> str:
    """
    Resolve database URL using environment variables and optional env files.

    Priority:
    1) DATABASE_URL
    2) DB_HOST / DB_PORT / DB_NAME / DB_USER / DB_PASSWORD (with defaults)
    """

    load_env_files()

    direct_url = os.getenv("DATABASE_URL")
    if direct_url and direct_url.strip():
        return normalize_postgres_url(direct_url.strip())

    return build_url_from_parts()


def _env_int(name: str, default: int, *, minimum: int = 0) -> int:
    raw_value = os.getenv(name)
    if raw_value is None or not raw_value.strip():
        return default
    try:
        return max(minimum, int(raw_value))
    except ValueError:
        return default


@dataclass(frozen=True)
class PoolSettings:
    """
    Connection pool sizing for the ingestion engine.

    ``pool_size`` bounds concurrent batch writers; each batch holds exactly
    one pooled connection for the length of its transaction.
    """

    pool_size: int = 20
    max_overflow: int = 10
    pool_timeout: int = 30
    pool_recycle: int = 1800
    echo: bool = False


def load_pool_settings() -> PoolSettings:
    load_env_files()
    defaults = PoolSettings()
    return PoolSettings(
        pool_size=_env_int("DB_POOL_SIZE", defaults.pool_size, minimum=1),
        max_overflow=_env_int("DB_MAX_OVERFLOW", defaults.max_overflow),
        pool_timeout=_env_int("DB_POOL_TIMEOUT", defaults.pool_timeout, minimum=1),
        pool_recycle=_env_int("DB_POOL_RECYCLE", defaults.pool_recycle),
        echo=os.getenv("SQL_ECHO", "").strip().lower() in {"1", "true", "yes", "on"},
    )
