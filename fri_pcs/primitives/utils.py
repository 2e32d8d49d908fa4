"""Integer and index helpers shared by the primitives."""

import numpy as np


def is_power_of_two(x: int) -> bool:
    return x > 0 and x & (x - 1) == 0


def log2(size: int) -> int:
    """Compute log2 of size (must be power of 2)."""
    assert is_power_of_two(size), f"{size} is not a power of two"
    return size.bit_length() - 1


def next_power_of_two(n: int) -> int:
    if n <= 1:
        return 1
    return 1 << (n - 1).bit_length()


def bit_reverse(x: int, length: int) -> int:
    xr = 0
    for i in range(length):
        xr |= ((x >> i) & 1) << (length - 1 - i)
    return xr


def bit_reverse_permutation(n: int) -> np.ndarray:
    """Index array p such that p[i] is i with its log2(n) bits reversed."""
    n_bits = log2(n)
    idx = np.arange(n, dtype=np.int64)
    rev = np.zeros(n, dtype=np.int64)
    for i in range(n_bits):
        rev |= ((idx >> i) & 1) << (n_bits - 1 - i)
    return rev
