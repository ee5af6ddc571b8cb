"""
Repository-layer exceptions for the users store.
"""

from __future__ import annotations


class UserStoreError(Exception):
    """Base exception for users store failures."""


class StoreUnavailableError(UserStoreError):
    """Raised when no connection to the store can be acquired."""


class StoreResetError(UserStoreError):
    """Raised when the full-refresh truncate of the users table fails."""


class BatchWriteError(UserStoreError):
    """
    Raised when one batch insert fails and its transaction is rolled back.
    """

    def __init__(self, message: str, *, batch_size: int) -> None:
        super().__init__(message)
        self.batch_size = batch_size
