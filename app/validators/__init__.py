"""
app/validators package marker.
"""

from app.validators.header_validator import (
    CSVHeaderValidationError,
    MissingMandatoryFieldsError,
    validate_headers,
)

__all__ = [
    "CSVHeaderValidationError",
    "MissingMandatoryFieldsError",
    "validate_headers",
]
