"""
app/services/csv_ingestion_service.py

Service layer driving one streaming CSV ingestion run.

A run moves through four states:

    AWAITING_HEADER -> STREAMING -> DRAINING -> DONE

The first non-empty line is the header and must contain every mandatory
field path. Each later non-blank line is tokenized and materialized; invalid
rows go to the run's error sink and are skipped. Valid records are buffered
and written in batches, one transaction per batch. A failed batch is rolled
back, counted as errors and the run continues.

Every run is a full refresh: the ``users`` table is truncated after the
header is accepted and before the first row is read, so a completed run
leaves exactly the current file's valid rows in the store.

Runs are serialized process-wide, including the post-run hook; the truncate
is not safe against a concurrent run on the same table.
"""

from __future__ import annotations

import io
import logging
import threading
import uuid
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache, partial
from pathlib import Path
from typing import Protocol

from fastapi import UploadFile

from app.config import get_csv_ingestion_settings
from app.domain.user_record import RunSummary, UserRecord
from app.logging_utils import log_event
from app.mappers.record_mapper import RecordMapper
from app.parsing.line_tokenizer import tokenize_line
from app.repositories.errors import BatchWriteError
from app.services.batch_accumulator import BatchAccumulator
from app.services.batch_writer import TransactionalBatchWriter
from app.services.error_sink import ErrorSink
from app.validators.header_validator import CSVHeaderValidationError, validate_headers

logger = logging.getLogger(__name__)

_RUN_LOCK = threading.Lock()


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class IngestionInputError(RuntimeError):
    """
    Raised when the input stream cannot be read. Fatal for the run.
    """


# ---------------------------------------------------------------------------
# Run state
# ---------------------------------------------------------------------------


class PipelineState(str, Enum):
    AWAITING_HEADER = "awaiting_header"
    STREAMING = "streaming"
    DRAINING = "draining"
    DONE = "done"


class BatchWriter(Protocol):
    def reset_store(self) -> None:
        ...

    def write_batch(self, batch: Sequence[UserRecord]) -> int:
        ...


@dataclass
class IngestionRunContext:
    """
    Mutable state owned by exactly one run; replaced at the start of the next.
    """

    error_sink: ErrorSink
    run_id: uuid.UUID = field(default_factory=uuid.uuid4)
    state: PipelineState = PipelineState.AWAITING_HEADER
    headers: tuple[str, ...] = ()
    records_processed: int = 0
    batch_errors: int = 0
    failed_batches: int = 0
    batches_written: int = 0

    def summary(self) -> RunSummary:
        return RunSummary(
            records_processed=self.records_processed,
            errors=self.error_sink.count + self.batch_errors,
            row_errors=self.error_sink.count,
            failed_batches=self.failed_batches,
            batches_written=self.batches_written,
            headers=self.headers,
            captured_errors=tuple(self.error_sink.entries),
        )


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class CSVIngestionService:
    """
    Coordinates tokenizing, materializing, batching and persisting CSV rows.
    """

    def __init__(
        self,
        *,
        batch_size: int,
        error_log_path: str | Path,
        max_captured_errors: int = 500,
        log_row_errors: bool = True,
        writer: BatchWriter | None = None,
        mapper: RecordMapper | None = None,
        after_run: Callable[[RunSummary], None] | None = None,
    ) -> None:
        self._batch_size = max(1, batch_size)
        self._error_log_path = Path(error_log_path)
        self._max_captured_errors = max(1, max_captured_errors)
        self._log_row_errors = log_row_errors
        self._writer = writer or TransactionalBatchWriter()
        self._mapper = mapper or RecordMapper()
        self._after_run = after_run

    @property
    def error_log_path(self) -> Path:
        return self._error_log_path

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def ingest_upload(
        self,
        *,
        upload_file: UploadFile,
        on_batch: Callable[[int], None] | None = None,
    ) -> RunSummary:
        """
        Ingest an uploaded file without staging it on disk.
        """

        raw_file = upload_file.file
        raw_file.seek(0)
        text_stream = io.TextIOWrapper(raw_file, encoding="utf-8-sig", newline="")
        try:
            return self.ingest_lines(text_stream, on_batch=on_batch)
        finally:
            try:
                text_stream.detach()
            except ValueError:
                pass

    def ingest_file(
        self,
        path: str | Path,
        *,
        on_batch: Callable[[int], None] | None = None,
    ) -> RunSummary:
        try:
            handle = open(path, encoding="utf-8-sig", newline="")
        except OSError as exc:
            raise IngestionInputError(f"Unable to open CSV file {path}: {exc}") from exc
        with handle:
            return self.ingest_lines(handle, on_batch=on_batch)

    def ingest_lines(
        self,
        lines: Iterable[str],
        *,
        on_batch: Callable[[int], None] | None = None,
    ) -> RunSummary:
        """
        Run one full-refresh ingestion over ``lines`` and return its summary.

        Args:
            lines:     Input lines; the first non-empty one is the header.
            on_batch:  Optional callback receiving the record count of every
                       successfully written batch.

        Raises:
            CSVHeaderValidationError: header missing or lacking mandatory paths.
            IngestionInputError:      the input could not be read.
            UserStoreError:           the store could not be reset or reached.
        """

        with _RUN_LOCK:
            context = self._start_run()
            accumulator: BatchAccumulator[UserRecord] = BatchAccumulator(
                batch_size=self._batch_size,
                flush=partial(self._flush_batch, context, on_batch),
            )

            try:
                for line_number, raw_line in _numbered_lines(lines):
                    line = raw_line.rstrip("\r\n")
                    if not line.strip():
                        continue

                    if context.state is PipelineState.AWAITING_HEADER:
                        self._accept_header(context, line)
                        continue

                    self._process_row(context, accumulator, line_number, line)

                if context.state is PipelineState.AWAITING_HEADER:
                    raise CSVHeaderValidationError("CSV header row is missing.")

                context.state = PipelineState.DRAINING
                accumulator.drain()
            except Exception:
                dropped = accumulator.discard()
                context.state = PipelineState.DONE
                if dropped:
                    logger.warning(
                        "Run %s aborted; discarded %d unflushed records",
                        context.run_id,
                        dropped,
                    )
                raise

            context.state = PipelineState.DONE
            summary = context.summary()
            log_event(
                logger,
                logging.INFO,
                "csv_ingestion_completed",
                run_id=str(context.run_id),
                records_processed=summary.records_processed,
                errors=summary.errors,
                failed_batches=summary.failed_batches,
            )
            # after_run completes before the next run may reset the store.
            self._notify_after_run(summary)

        return summary

    # ------------------------------------------------------------------
    # Run internals
    # ------------------------------------------------------------------

    def _start_run(self) -> IngestionRunContext:
        sink = ErrorSink(
            log_path=self._error_log_path,
            max_captured_errors=self._max_captured_errors,
            log_row_errors=self._log_row_errors,
        )
        sink.reset()
        context = IngestionRunContext(error_sink=sink)
        logger.info("CSV ingestion run %s started", context.run_id)
        return context

    def _accept_header(self, context: IngestionRunContext, line: str) -> None:
        context.headers = validate_headers(tokenize_line(line))
        self._writer.reset_store()
        context.state = PipelineState.STREAMING

    def _process_row(
        self,
        context: IngestionRunContext,
        accumulator: BatchAccumulator[UserRecord],
        line_number: int,
        line: str,
    ) -> None:
        try:
            record = self._mapper.materialize(context.headers, tokenize_line(line))
        except Exception as exc:  # noqa: BLE001
            context.error_sink.append(line_number, str(exc))
            return
        accumulator.append(record)

    def _flush_batch(
        self,
        context: IngestionRunContext,
        on_batch: Callable[[int], None] | None,
        batch: list[UserRecord],
    ) -> None:
        try:
            self._writer.write_batch(batch)
        except BatchWriteError as exc:
            context.failed_batches += 1
            context.batch_errors += len(batch)
            logger.error("Batch upload failed run=%s: %s", context.run_id, exc)
            return

        context.records_processed += len(batch)
        context.batches_written += 1
        log_event(
            logger,
            logging.INFO,
            "csv_batch_written",
            run_id=str(context.run_id),
            records=len(batch),
            records_processed=context.records_processed,
        )
        if on_batch is not None:
            on_batch(len(batch))

    def _notify_after_run(self, summary: RunSummary) -> None:
        if self._after_run is None:
            return
        try:
            self._after_run(summary)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Post-ingestion hook failed: %s", exc)


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------


def _numbered_lines(lines: Iterable[str]) -> Iterator[tuple[int, str]]:
    """Yield ``(line_number, line)`` pairs, 1-based, wrapping read failures."""
    iterator = iter(lines)
    line_number = 0
    while True:
        try:
            raw_line = next(iterator)
        except StopIteration:
            return
        except (OSError, UnicodeDecodeError) as exc:
            raise IngestionInputError(
                f"Failed to read CSV input after line {line_number}: {exc}"
            ) from exc
        line_number += 1
        yield line_number, raw_line


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_csv_ingestion_service() -> CSVIngestionService:
    """
    Build and cache the ingestion service with env-driven settings.
    """

    settings = get_csv_ingestion_settings()
    after_run: Callable[[RunSummary], None] | None = None
    if settings.report_age_distribution:
        from app.services.age_distribution_service import get_age_distribution_service

        report_service = get_age_distribution_service()
        after_run = lambda _summary: report_service.log_report()  # noqa: E731

    return CSVIngestionService(
        batch_size=settings.batch_size,
        error_log_path=settings.error_log_path,
        max_captured_errors=settings.max_captured_errors,
        log_row_errors=settings.log_row_errors,
        after_run=after_run,
    )
