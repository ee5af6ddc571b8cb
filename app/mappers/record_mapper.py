"""
app/mappers/record_mapper.py

Materializes one tokenized CSV row into a nested ``UserRecord``.

Headers are dotted paths. Mandatory paths (``name.firstName``,
``name.lastName``, ``age``) are routed into the record itself; every other
path is routed into a separate ``additional_info`` tree. Values stay strings,
except leaves whose key is exactly ``age`` and whose value is an integer
literal.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any

from app.domain.path_tree import PATH_SEPARATOR, BranchNode
from app.domain.user_record import (
    AGE_FIELD,
    FIRST_NAME_FIELD,
    LAST_NAME_FIELD,
    MANDATORY_FIELDS,
    UserRecord,
)

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")

AGE_LEAF_KEY = "age"

# Upper bound of the INTEGER age column.
MAX_AGE = 2_147_483_647


class RowMaterializationError(ValueError):
    """
    Raised when one row cannot be turned into a record. Row-scoped.
    """

    def __init__(self, message: str, *, field: str | None = None, value: str | None = None) -> None:
        super().__init__(message)
        self.field = field
        self.value = value


def parse_integer(value: str) -> int | None:
    """
    Parse a plain integer literal, or return None.
    """

    if not _INTEGER_PATTERN.fullmatch(value):
        return None
    return int(value)


def coerce_leaf(path: str, value: str) -> Any:
    """
    Apply the leaf coercion rule: only ``age`` leaves become integers.
    """

    leaf_key = path.rsplit(PATH_SEPARATOR, 1)[-1]
    if leaf_key == AGE_LEAF_KEY:
        parsed = parse_integer(value)
        if parsed is not None:
            return parsed
    return value


class RecordMapper:
    """
    Converts ``(headers, values)`` pairs into ``UserRecord`` instances.
    """

    def materialize(self, headers: Sequence[str], values: Sequence[str]) -> UserRecord:
        record_tree = BranchNode()
        additional_tree = BranchNode()
        seen_mandatory: set[str] = set()

        # Values beyond the header count are ignored; missing ones stay absent.
        for header, raw_value in zip(headers, values):
            path = header.strip()
            value = raw_value.strip()

            if path in MANDATORY_FIELDS:
                if path == AGE_FIELD:
                    self._validate_age(value)
                record_tree.insert(path, coerce_leaf(path, value))
                seen_mandatory.add(path)
            else:
                additional_tree.insert(path, coerce_leaf(path, value))

        for field in MANDATORY_FIELDS:
            if field not in seen_mandatory:
                raise RowMaterializationError(
                    f"Missing value for mandatory field: {field}",
                    field=field,
                )

        data = record_tree.to_dict()
        name = data["name"]
        return UserRecord(
            first_name=name[_leaf_key(FIRST_NAME_FIELD)],
            last_name=name[_leaf_key(LAST_NAME_FIELD)],
            age=data[AGE_FIELD],
            additional_info=None if additional_tree.is_empty() else additional_tree.to_dict(),
        )

    def _validate_age(self, value: str) -> None:
        parsed = parse_integer(value) if value else None
        if parsed is None or parsed < 0:
            raise RowMaterializationError(
                f'Invalid age value: "{value}". Age must be a valid non-negative integer.',
                field=AGE_FIELD,
                value=value,
            )
        if parsed > MAX_AGE:
            raise RowMaterializationError(
                f'Invalid age value: "{value}". Age must not exceed {MAX_AGE}.',
                field=AGE_FIELD,
                value=value,
            )


def _leaf_key(path: str) -> str:
    return path.rsplit(PATH_SEPARATOR, 1)[-1]
