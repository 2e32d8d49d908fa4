"""Tests for the bounded worker pool helper."""

import threading

import pytest

from fri_pcs.primitives.workers import chunks, parallel_map


@pytest.mark.parametrize("max_workers", [1, 2, 8])
def test_results_keep_input_order(max_workers: int) -> None:
    assert parallel_map(lambda x: x * x, range(20), max_workers) == [x * x for x in range(20)]


def test_single_worker_runs_inline() -> None:
    main = threading.get_ident()
    seen = parallel_map(lambda _: threading.get_ident(), range(5), max_workers=1)
    assert set(seen) == {main}


def test_exceptions_propagate() -> None:
    def boom(x: int) -> int:
        if x == 3:
            raise RuntimeError("boom")
        return x

    with pytest.raises(RuntimeError):
        parallel_map(boom, range(6), max_workers=3)


@pytest.mark.parametrize("n, k", [(10, 3), (8, 4), (3, 8), (0, 2)])
def test_chunks_cover_items(n: int, k: int) -> None:
    items = list(range(n))
    parts = list(chunks(items, k))
    assert [x for part in parts for x in part] == items
    assert len(parts) <= k
    if parts:
        sizes = [len(p) for p in parts]
        assert max(sizes) - min(sizes) <= 1
