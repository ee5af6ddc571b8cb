"""
app/domain/user_record.py

Domain models used by the CSV ingestion flow.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

FIRST_NAME_FIELD = "name.firstName"
LAST_NAME_FIELD = "name.lastName"
AGE_FIELD = "age"

MANDATORY_FIELDS: tuple[str, ...] = (FIRST_NAME_FIELD, LAST_NAME_FIELD, AGE_FIELD)

ADDRESS_KEY = "address"


@dataclass(frozen=True)
class UserRecord:
    """
    One materialized CSV row.

    ``additional_info`` holds every non-mandatory leaf, nested by dotted path,
    or ``None`` when the row carries no optional fields.
    """

    first_name: str
    last_name: str
    age: int
    additional_info: dict[str, Any] | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def as_dict(self) -> dict[str, Any]:
        """
        Nested mapping view: ``{"name": {...}, "age": n, "additional_info": {...}}``.
        """

        result: dict[str, Any] = {
            "name": {"firstName": self.first_name, "lastName": self.last_name},
            "age": self.age,
        }
        if self.additional_info:
            result["additional_info"] = self.additional_info
        return result


@dataclass(frozen=True)
class RowError:
    """
    One rejected CSV row.
    """

    line_number: int
    message: str

    def format(self) -> str:
        return f"Line {self.line_number}: {self.message}"


@dataclass(frozen=True)
class RunSummary:
    """
    End-of-run ingestion summary.

    ``errors`` counts rejected rows plus every record of a failed batch;
    failed batches are not attributed to line numbers.
    """

    records_processed: int
    errors: int
    row_errors: int = 0
    failed_batches: int = 0
    batches_written: int = 0
    headers: tuple[str, ...] = ()
    captured_errors: tuple[RowError, ...] = ()
