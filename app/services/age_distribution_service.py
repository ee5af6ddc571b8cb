"""
app/services/age_distribution_service.py

Age distribution report over the ``users`` table.

The report is read-only. After each ingestion run it is rendered as a small
text table and written to the log; the same data backs the
``/api/age-distribution`` endpoint.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from functools import lru_cache

from sqlalchemy.orm import Session

from app.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

_RULE_WIDTH = 50
_TABLE_WIDTH = 40


@dataclass(frozen=True)
class AgeGroupShare:
    """
    One age bucket with its head count and share of all users.
    """

    age_group: str
    count: int
    percentage: float


class AgeDistributionService:
    """
    Reads bucketed age counts and renders them as a report.
    """

    def __init__(self, *, session_factory: Callable[[], Session] | None = None) -> None:
        if session_factory is None:
            from db.session import SessionLocal

            self._session_factory = SessionLocal
        else:
            self._session_factory = session_factory

    def get_distribution(self) -> list[AgeGroupShare]:
        with self._session_factory() as session:
            rows = UserRepository(session).get_age_distribution()

        return [
            AgeGroupShare(
                age_group=row.age_group,
                count=int(row.count),
                percentage=float(row.percentage),
            )
            for row in rows
        ]

    def log_report(self) -> list[AgeGroupShare]:
        distribution = self.get_distribution()
        for line in render_report(distribution):
            logger.info(line)
        return distribution


@lru_cache(maxsize=1)
def get_age_distribution_service() -> AgeDistributionService:
    return AgeDistributionService()


def render_report(distribution: list[AgeGroupShare]) -> list[str]:
    """
    Render the distribution as plain-text report lines.
    """

    lines = ["=" * _RULE_WIDTH, "AGE DISTRIBUTION REPORT", "=" * _RULE_WIDTH]
    if not distribution:
        lines.append("No users found in the database.")
        return lines

    lines.append("Age-Group\t\t% Distribution")
    lines.append("-" * _TABLE_WIDTH)
    lines.extend(f"{item.age_group}\t\t{item.percentage}%" for item in distribution)
    lines.append("-" * _TABLE_WIDTH)
    lines.append(f"Total Users: {sum(item.count for item in distribution)}")
    lines.append("=" * _RULE_WIDTH)
    return lines
