"""Bounded worker pool for independent per-item work."""

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, Iterator, List, Sequence, TypeVar

T = TypeVar("T")
R = TypeVar("R")


def parallel_map(fn: Callable[[T], R], items: Iterable[T], max_workers: int = 1) -> List[R]:
    """Apply fn to every item, results in input order.

    With max_workers <= 1 the work runs inline on the calling thread.
    Exceptions raised by fn propagate to the caller.
    """
    items = list(items)
    if max_workers <= 1 or len(items) <= 1:
        return [fn(item) for item in items]

    with ThreadPoolExecutor(max_workers=min(max_workers, len(items))) as executor:
        return list(executor.map(fn, items))


def chunks(items: Sequence[T], n_chunks: int) -> Iterator[Sequence[T]]:
    """Split items into at most n_chunks contiguous slices of near-equal size."""
    n_chunks = max(1, min(n_chunks, len(items)))
    size, extra = divmod(len(items), n_chunks)
    start = 0
    for i in range(n_chunks):
        end = start + size + (1 if i < extra else 0)
        if end > start:
            yield items[start:end]
        start = end
