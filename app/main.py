from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI


def _validate_env() -> None:
    """
    Validate required environment variables at startup.

    Runs before any service or database connection is initialised.
    Raises RuntimeError listing every invalid variable so the operator can
    fix all problems in one restart cycle.
    """

    from db.config import load_env_files, resolve_database_url

    load_env_files()

    errors: list[str] = []

    # --- Database URL ---------------------------------------------------
    database_url = resolve_database_url()
    if not database_url.startswith("postgresql"):
        errors.append(
            "DATABASE_URL must point at PostgreSQL (postgres://, postgresql:// "
            "or postgresql+psycopg://)."
        )

    # --- Ingestion settings ---------------------------------------------
    raw_batch_size = os.getenv("CSV_INGEST_BATCH_SIZE", "").strip()
    if raw_batch_size:
        try:
            if int(raw_batch_size) < 1:
                errors.append("CSV_INGEST_BATCH_SIZE must be a positive integer.")
        except ValueError:
            errors.append(f"CSV_INGEST_BATCH_SIZE='{raw_batch_size}' is not an integer.")

    if errors:
        raise RuntimeError(
            "Startup validation failed. Missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _check_db() -> None:
    """Open a session and run SELECT 1. Raises RuntimeError if the DB is unreachable."""
    from sqlalchemy import text

    from db.session import SessionLocal

    try:
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        finally:
            db.close()
    except Exception as exc:
        raise RuntimeError("Database unavailable.") from exc


def _ensure_schema() -> None:
    """
    Make sure every table registered on Base.metadata exists.

    With DB_AUTO_CREATE_SCHEMA enabled, missing tables are created in place.
    Otherwise startup aborts so the operator runs migrations first.
    """
    from sqlalchemy import inspect as sa_inspect

    import db.models  # noqa: F401
    from app.config import get_database_schema_settings
    from db.base import Base
    from db.session import get_engine

    engine = get_engine()
    if get_database_schema_settings().auto_create_schema:
        Base.metadata.create_all(engine)
        return

    inspector = sa_inspect(engine)
    actual: set[str] = set(inspector.get_table_names())
    expected: set[str] = set(Base.metadata.tables.keys())
    missing = expected - actual

    if missing:
        log = logging.getLogger(__name__)
        log.critical(
            "Schema mismatch: %d table(s) defined in ORM metadata are absent from "
            "the database: %s. Run 'alembic upgrade head' and restart.",
            len(missing),
            ", ".join(sorted(missing)),
        )
        raise RuntimeError(
            f"Schema mismatch: {len(missing)} table(s) missing from the database "
            f"({', '.join(sorted(missing))}). Run migrations and restart."
        )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Validate DB connectivity and schema on boot; dispose the pool on exit."""
    _check_db()
    logging.getLogger(__name__).info("Database connectivity confirmed")
    _ensure_schema()
    logging.getLogger(__name__).info("Database schema validated")
    try:
        yield
    finally:
        from db.session import dispose_engine

        if dispose_engine():
            logging.getLogger(__name__).info("Database pool disposed")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="CSV User Ingest API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers import age_distribution_router, csv_ingestion_router

    application.include_router(csv_ingestion_router)
    application.include_router(age_distribution_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
