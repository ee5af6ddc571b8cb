"""
app/services/error_sink.py

Per-run log of rejected CSV rows.

Each entry is written as ``Line <n>: <message>`` to a plain-text log file
that stays readable until the next run resets it. Entries are also kept in
memory up to ``max_captured_errors``; the error count itself is unbounded.
"""

from __future__ import annotations

import logging
from pathlib import Path

from app.domain.user_record import RowError

logger = logging.getLogger(__name__)


class ErrorSink:
    """
    Append-only error collector for one ingestion run.
    """

    def __init__(
        self,
        *,
        log_path: str | Path,
        max_captured_errors: int = 500,
        log_row_errors: bool = True,
    ) -> None:
        self._log_path = Path(log_path)
        self._max_captured_errors = max(1, max_captured_errors)
        self._log_row_errors = log_row_errors
        self._entries: list[RowError] = []
        self._count = 0

    @property
    def log_path(self) -> Path:
        return self._log_path

    @property
    def count(self) -> int:
        return self._count

    @property
    def entries(self) -> list[RowError]:
        return list(self._entries)

    def reset(self) -> None:
        """
        Discard the previous run's log before the first row is processed.
        """

        self._log_path.unlink(missing_ok=True)
        self._entries.clear()
        self._count = 0

    def append(self, line_number: int, message: str) -> RowError:
        entry = RowError(line_number=line_number, message=message)
        self._count += 1
        if len(self._entries) < self._max_captured_errors:
            self._entries.append(entry)

        if self._log_row_errors:
            logger.warning("Skipping row %s due to error: %s", line_number, message)

        try:
            self._log_path.parent.mkdir(parents=True, exist_ok=True)
            with self._log_path.open("a", encoding="utf-8") as handle:
                handle.write(entry.format() + "\n")
        except OSError as exc:
            logger.error("Failed to write to error log path=%s: %s", self._log_path, exc)

        return entry


def read_error_log(log_path: str | Path) -> str | None:
    """
    Return the current error log text, or None when no run produced one.
    """

    path = Path(log_path)
    if not path.exists():
        return None
    return path.read_text(encoding="utf-8")
