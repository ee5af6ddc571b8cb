"""
app/repositories package marker.
"""

from app.repositories.errors import (
    BatchWriteError,
    StoreResetError,
    StoreUnavailableError,
    UserStoreError,
)
from app.repositories.user_repository import UserRepository, build_insert_payload

__all__ = [
    "BatchWriteError",
    "StoreResetError",
    "StoreUnavailableError",
    "UserRepository",
    "UserStoreError",
    "build_insert_payload",
]
