"""
db/models/user.py

Destination table for ingested CSV user records.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Integer, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(
        String,
        nullable=False,
        comment="firstName and lastName joined by a single space",
    )
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    address: Mapped[Any | None] = mapped_column(
        JSONB,
        nullable=True,
        comment="address.* sub-tree of the source row",
    )
    additional_info: Mapped[dict[str, Any] | None] = mapped_column(
        JSONB,
        nullable=True,
        comment="Every other non-mandatory field, nested by dotted path",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=True,
        server_default=func.now(),
    )
