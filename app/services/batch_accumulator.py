"""
app/services/batch_accumulator.py

Size-bounded buffer that hands full batches to a flush callable.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")


class BatchAccumulator(Generic[T]):
    """
    Buffers items in arrival order and flushes them in batches of ``batch_size``.

    ``flush`` receives the batch list; the accumulator starts a new list
    before calling it, so the callee owns the handed-over batch.
    """

    def __init__(self, *, batch_size: int, flush: Callable[[list[T]], None]) -> None:
        self._batch_size = max(1, batch_size)
        self._flush = flush
        self._batch: list[T] = []
        self._flushed_batches = 0

    @property
    def batch_size(self) -> int:
        return self._batch_size

    @property
    def flushed_batches(self) -> int:
        return self._flushed_batches

    def append(self, item: T) -> None:
        self._batch.append(item)
        if len(self._batch) >= self._batch_size:
            self._hand_over()

    def drain(self) -> None:
        """
        Flush the remaining items once, if any.
        """

        if self._batch:
            self._hand_over()

    def discard(self) -> int:
        """
        Drop unflushed items and return how many were dropped.
        """

        dropped = len(self._batch)
        self._batch = []
        return dropped

    def _hand_over(self) -> None:
        batch, self._batch = self._batch, []
        self._flushed_batches += 1
        self._flush(batch)
