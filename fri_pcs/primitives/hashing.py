"""Pluggable fixed-output hash primitive backed by hashlib."""

import hashlib
from dataclasses import dataclass

DEFAULT_HASH = "sha3_256"

# Extendable-output functions need an explicit length and are not usable as a
# fixed-size digest.
_XOF_ALGORITHMS = frozenset({"shake_128", "shake_256"})


@dataclass(frozen=True)
class HashFunction:
    """Named hashlib algorithm with a fixed digest size."""
    name: str = DEFAULT_HASH

    def __post_init__(self) -> None:
        if self.name in _XOF_ALGORITHMS:
            raise ValueError(f"hash {self.name!r} has no fixed digest size")
        try:
            hashlib.new(self.name)
        except ValueError as e:
            raise ValueError(f"unsupported hash algorithm {self.name!r}") from e

    @property
    def digest_size(self) -> int:
        return hashlib.new(self.name).digest_size

    def digest(self, *parts: bytes) -> bytes:
        """Hash of the concatenation of parts."""
        h = hashlib.new(self.name)
        for part in parts:
            h.update(part)
        return h.digest()
