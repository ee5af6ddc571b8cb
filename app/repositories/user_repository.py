"""
app/repositories/user_repository.py

Persistence layer for ingested user records.

The repository never commits on its own; the caller controls the
transaction boundary.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlalchemy import Row, case, func, select, text
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.orm import Session

from app.domain.user_record import ADDRESS_KEY, UserRecord
from db.models.user import User

AGE_GROUP_UNDER_20 = "< 20"
AGE_GROUP_20_TO_40 = "20 to 40"
AGE_GROUP_41_TO_60 = "41 to 60"
AGE_GROUP_OVER_60 = "> 60"


def build_insert_payload(record: UserRecord) -> dict[str, Any]:
    """
    Flatten one record into ``users`` column values.

    The ``address`` sub-tree of ``additional_info`` moves to its own column;
    an ``additional_info`` left empty afterwards is stored as NULL.
    """

    additional_info = dict(record.additional_info or {})
    address = additional_info.pop(ADDRESS_KEY, None)
    return {
        "name": record.full_name,
        "age": record.age,
        "address": address,
        "additional_info": additional_info or None,
    }


class UserRepository:
    """
    Repository for the ``users`` table.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def bulk_insert(self, records: Sequence[UserRecord]) -> int:
        """
        Insert every record with one multi-row INSERT statement.

        Returns the number of rows written.
        """

        if not records:
            return 0

        payloads = [build_insert_payload(record) for record in records]
        stmt = insert(User).values(payloads).returning(User.id)
        return len(self._session.scalars(stmt).all())

    def truncate(self) -> None:
        """
        Remove every row and restart the ``id`` sequence.
        """

        self._session.execute(text(f"TRUNCATE TABLE {User.__tablename__} RESTART IDENTITY"))

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_age_distribution(self) -> list[Row[Any]]:
        """
        Group users into four fixed age buckets.

        Rows are ``(age_group, count, percentage)`` ordered by the minimum
        age in each bucket; percentage is rounded to two decimals.
        """

        age_group = case(
            (User.age < 20, AGE_GROUP_UNDER_20),
            (User.age.between(20, 40), AGE_GROUP_20_TO_40),
            (User.age.between(41, 60), AGE_GROUP_41_TO_60),
            else_=AGE_GROUP_OVER_60,
        )
        total = func.count()
        stmt = (
            select(
                age_group.label("age_group"),
                total.label("count"),
                func.round(total * 100.0 / func.sum(total).over(), 2).label("percentage"),
            )
            .group_by(age_group)
            .order_by(func.min(User.age))
        )
        return list(self._session.execute(stmt).all())
