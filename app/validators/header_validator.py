"""
app/validators/header_validator.py

Header-row validation for CSV ingestion.
"""

from __future__ import annotations

from collections.abc import Sequence

from app.domain.user_record import MANDATORY_FIELDS


class CSVHeaderValidationError(ValueError):
    """
    Raised when CSV shape/header validation fails.
    """


class MissingMandatoryFieldsError(CSVHeaderValidationError):
    """
    Raised when the header row lacks one or more mandatory field paths.
    """

    def __init__(self, missing_fields: Sequence[str]) -> None:
        self.missing_fields = tuple(missing_fields)
        super().__init__(f"Missing mandatory fields: {', '.join(self.missing_fields)}")


def validate_headers(
    headers: Sequence[str],
    mandatory_fields: Sequence[str] = MANDATORY_FIELDS,
) -> tuple[str, ...]:
    """
    Return the trimmed header tuple, or raise if a mandatory path is absent.
    """

    normalized = tuple(header.strip() for header in headers)
    present = set(normalized)
    missing = [field for field in mandatory_fields if field not in present]
    if missing:
        raise MissingMandatoryFieldsError(missing)
    return normalized
