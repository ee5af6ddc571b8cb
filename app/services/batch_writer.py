"""
app/services/batch_writer.py

All-or-nothing batch persistence for ingested user records.

Transaction contract:
  - ``reset_store`` truncates ``users`` and restarts its identity in its own
    transaction. It runs once before the first batch of a run.
  - ``write_batch`` acquires one pooled connection, inserts the whole batch
    with a single multi-row statement and commits. Any insert failure rolls
    the transaction back so none of the batch's rows persist.
  - The session is closed on every path, returning the connection to the pool.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.user_record import UserRecord
from app.repositories.errors import BatchWriteError, StoreResetError, StoreUnavailableError
from app.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class TransactionalBatchWriter:
    """
    Writes record batches to the ``users`` table, one transaction per batch.
    """

    def __init__(self, *, session_factory: Callable[[], Session] | None = None) -> None:
        if session_factory is None:
            from db.session import SessionLocal

            self._session_factory = SessionLocal
        else:
            self._session_factory = session_factory

    def reset_store(self) -> None:
        """
        Empty the destination table so the run ends with exactly this file's rows.
        """

        try:
            with self._session_factory() as session:
                with session.begin():
                    UserRepository(session).truncate()
        except SQLAlchemyError as exc:
            raise StoreResetError(f"Failed to clear users table: {exc}") from exc
        logger.info("Users table cleared")

    def write_batch(self, batch: Sequence[UserRecord]) -> int:
        """
        Persist one batch atomically and return the number of rows written.
        """

        if not batch:
            return 0

        with self._session_factory() as session:
            try:
                session.connection()
            except SQLAlchemyError as exc:
                raise StoreUnavailableError(f"Unable to acquire a database connection: {exc}") from exc

            try:
                inserted = UserRepository(session).bulk_insert(batch)
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                raise BatchWriteError(
                    f"Failed to persist batch of {len(batch)} records: {exc}",
                    batch_size=len(batch),
                ) from exc

        return inserted
