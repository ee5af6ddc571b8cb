"""
Shared fakes for ingestion tests. No database is touched.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pytest

from app.domain.user_record import UserRecord
from app.repositories.errors import BatchWriteError, StoreUnavailableError
from app.repositories.user_repository import build_insert_payload
from app.services.csv_ingestion_service import CSVIngestionService


class InMemoryBatchWriter:
    """
    Stand-in for TransactionalBatchWriter backed by a list of row payloads.

    ``failing_batches`` holds 1-based batch numbers whose write raises
    BatchWriteError; ``unavailable_from_batch`` makes that batch and every
    later one raise StoreUnavailableError.
    """

    def __init__(
        self,
        *,
        failing_batches: set[int] | None = None,
        unavailable_from_batch: int | None = None,
    ) -> None:
        self.rows: list[dict[str, Any]] = []
        self.batch_sizes: list[int] = []
        self.reset_calls = 0
        self._attempts = 0
        self._failing_batches = failing_batches or set()
        self._unavailable_from_batch = unavailable_from_batch

    def reset_store(self) -> None:
        self.reset_calls += 1
        self.rows.clear()

    def write_batch(self, batch: Sequence[UserRecord]) -> int:
        self._attempts += 1
        if self._unavailable_from_batch is not None and self._attempts >= self._unavailable_from_batch:
            raise StoreUnavailableError("connection refused")
        if self._attempts in self._failing_batches:
            raise BatchWriteError("simulated constraint violation", batch_size=len(batch))

        self.batch_sizes.append(len(batch))
        self.rows.extend(build_insert_payload(record) for record in batch)
        return len(batch)


def make_csv_lines(header: str, rows: Sequence[str]) -> list[str]:
    return [f"{header}\n", *(f"{row}\n" for row in rows)]


@pytest.fixture()
def writer() -> InMemoryBatchWriter:
    return InMemoryBatchWriter()


@pytest.fixture()
def error_log_path(tmp_path: Path) -> Path:
    return tmp_path / "error_log.txt"


@pytest.fixture()
def service(writer: InMemoryBatchWriter, error_log_path: Path) -> CSVIngestionService:
    return CSVIngestionService(
        batch_size=1000,
        error_log_path=error_log_path,
        writer=writer,
    )
