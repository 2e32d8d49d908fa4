"""
Fiat-Shamir transcript over a hashlib digest.

Prover and verifier feed the same public data in the same order and so draw
the same challenges. The state is a single running digest; every absorb
replaces it with H("absorb" || state || len(data) || data). Challenges are
read from H(tag || state || counter) blocks, where the counter increases with
every block ever squeezed, so no two blocks share an input.

A Transcript instance has a single owner and is not thread-safe.
"""

from typing import List, Optional

from fri_pcs.primitives.field import FieldElement, PrimeField
from fri_pcs.primitives.hashing import HashFunction

DEFAULT_LABEL = b"fri-pcs/v1"

FIELD_CHALLENGE_TAG = b"challenge/field"
INDEX_CHALLENGE_TAG = b"challenge/index"

# Extra bytes drawn per challenge so the reduction mod p or mod bound is
# statistically close to uniform.
_SECURITY_BYTES = 16


class Transcript:
    """
    Running-digest Fiat-Shamir transcript.

    Attributes:
        hasher: Hash primitive used for every state update and squeeze
        state: Current digest
        counter: Number of blocks squeezed so far
    """

    def __init__(self, label: bytes = DEFAULT_LABEL, hasher: Optional[HashFunction] = None):
        self.hasher = hasher or HashFunction()
        self.state = self.hasher.digest(b"transcript-init", label)
        self.counter = 0

    def absorb(self, data: bytes) -> None:
        """Mix a byte string into the state."""
        self.state = self.hasher.digest(
            b"absorb", self.state, len(data).to_bytes(8, "big"), data
        )

    def absorb_int(self, value: int) -> None:
        """Mix a non-negative integer of any size into the state."""
        value = int(value)
        if value < 0:
            raise ValueError(f"cannot absorb negative integer {value}")
        self.absorb(value.to_bytes(max(1, (value.bit_length() + 7) // 8), "big"))

    def challenge_field_element(self, field: PrimeField) -> FieldElement:
        """Uniform field element derived from the current state."""
        data = self._squeeze(FIELD_CHALLENGE_TAG, field.byte_width + _SECURITY_BYTES)
        return field.GF(int.from_bytes(data, "big") % field.p)

    def challenge_indices(self, count: int, bound: int) -> List[int]:
        """count indices in [0, bound), drawn independently (repeats possible)."""
        if bound <= 0:
            raise ValueError(f"index bound must be positive, got {bound}")
        if count < 0:
            raise ValueError(f"index count must be non-negative, got {count}")

        data = self._squeeze(INDEX_CHALLENGE_TAG, count * _SECURITY_BYTES)
        return [
            int.from_bytes(data[i * _SECURITY_BYTES:(i + 1) * _SECURITY_BYTES], "big") % bound
            for i in range(count)
        ]

    def get_state(self) -> bytes:
        """Current digest, for debugging and for comparing two transcripts."""
        return self.state

    def _squeeze(self, tag: bytes, n_bytes: int) -> bytes:
        out = b""
        while len(out) < n_bytes:
            out += self.hasher.digest(tag, self.state, self.counter.to_bytes(8, "big"))
            self.counter += 1
        return out[:n_bytes]
