from __future__ import annotations

from app.services.batch_accumulator import BatchAccumulator


def _collector() -> tuple[list[list[int]], BatchAccumulator[int]]:
    flushed: list[list[int]] = []
    return flushed, BatchAccumulator(batch_size=1000, flush=flushed.append)


def test_flushes_full_batches_then_remainder() -> None:
    flushed, accumulator = _collector()

    for item in range(2500):
        accumulator.append(item)
    accumulator.drain()

    assert [len(batch) for batch in flushed] == [1000, 1000, 500]
    assert accumulator.flushed_batches == 3


def test_batches_preserve_arrival_order() -> None:
    flushed, accumulator = _collector()

    for item in range(2500):
        accumulator.append(item)
    accumulator.drain()

    assert [item for batch in flushed for item in batch] == list(range(2500))


def test_exact_multiple_needs_no_final_flush() -> None:
    flushed, accumulator = _collector()

    for item in range(2000):
        accumulator.append(item)
    accumulator.drain()

    assert [len(batch) for batch in flushed] == [1000, 1000]


def test_drain_on_empty_buffer_is_a_no_op() -> None:
    flushed, accumulator = _collector()

    accumulator.drain()

    assert flushed == []


def test_discard_drops_pending_items() -> None:
    flushed, accumulator = _collector()

    for item in range(10):
        accumulator.append(item)

    assert accumulator.discard() == 10
    accumulator.drain()
    assert flushed == []


def test_handed_over_batch_is_not_reused() -> None:
    flushed: list[list[int]] = []
    accumulator = BatchAccumulator(batch_size=2, flush=flushed.append)

    for item in range(4):
        accumulator.append(item)

    assert flushed == [[0, 1], [2, 3]]
    assert flushed[0] is not flushed[1]


def test_batch_size_is_at_least_one() -> None:
    flushed: list[list[int]] = []
    accumulator = BatchAccumulator(batch_size=0, flush=flushed.append)

    accumulator.append(1)

    assert accumulator.batch_size == 1
    assert flushed == [[1]]
