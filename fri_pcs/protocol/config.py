"""FRI configuration and per-instance parameters."""

from dataclasses import dataclass
from functools import cached_property
from typing import Optional

from fri_pcs.errors import DegreeTooLarge, InvalidDomainSize
from fri_pcs.primitives.field import GOLDILOCKS_PRIME, PrimeField, get_field
from fri_pcs.primitives.hashing import DEFAULT_HASH, HashFunction
from fri_pcs.primitives.transcript import DEFAULT_LABEL, Transcript
from fri_pcs.primitives.utils import is_power_of_two, log2, next_power_of_two

PROTOCOL_ID = DEFAULT_LABEL


# --- Configuration ---

@dataclass(frozen=True)
class FriConfig:
    """Choices shared by prover and verifier.

    Attributes:
        field_modulus: Prime p of the base field
        final_size: Size of the last, uncommitted layer. None derives it from
            the degree bound so that the final layer keeps the full blowup.
        hash_name: Any fixed-output hashlib algorithm
        max_workers: Worker pool size for leaf hashing and query checks
        protocol_id: Transcript domain separation label
    """
    field_modulus: int = GOLDILOCKS_PRIME
    final_size: Optional[int] = None
    hash_name: str = DEFAULT_HASH
    max_workers: int = 4
    protocol_id: bytes = PROTOCOL_ID

    def __post_init__(self) -> None:
        if self.final_size is not None and not is_power_of_two(self.final_size):
            raise ValueError(f"final_size must be a power of two, got {self.final_size}")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")
        # Fail early on unknown hash names and composite moduli
        HashFunction(self.hash_name)
        get_field(self.field_modulus)

    @cached_property
    def field(self) -> PrimeField:
        return get_field(self.field_modulus)

    @cached_property
    def hasher(self) -> HashFunction:
        return HashFunction(self.hash_name)

    def transcript(self) -> Transcript:
        """Fresh transcript seeded with the protocol id."""
        return Transcript(self.protocol_id, self.hasher)


# --- Instance Parameters ---

@dataclass(frozen=True)
class FriParameters:
    """Shape of one FRI instance.

    The prover folds num_rounds times. Layers 0..num_rounds-1 are committed;
    layer num_rounds has final_size points and is sent as a single constant.

    Attributes:
        domain_size: Size n of the initial evaluation domain
        degree_bound: Committed polynomial must satisfy deg < degree_bound; a
            power of two >= 2, so that folding num_rounds times reaches a
            constant exactly when the degree is below it
        query_count: Number of query positions Q
        final_size: Size of the final layer, resolved from degree_bound when None
    """
    domain_size: int
    degree_bound: int
    query_count: int
    final_size: Optional[int] = None

    def __post_init__(self) -> None:
        n = self.domain_size
        if not is_power_of_two(n) or n < 2:
            raise InvalidDomainSize(f"domain size must be a power of two >= 2, got {n}")
        if self.degree_bound <= 0:
            raise ValueError(f"degree_bound must be positive, got {self.degree_bound}")
        if self.query_count <= 0:
            raise ValueError(f"query_count must be positive, got {self.query_count}")
        if self.degree_bound > n:
            raise DegreeTooLarge(f"degree bound {self.degree_bound} exceeds domain size {n}")

        if self.degree_bound < 2 or not is_power_of_two(self.degree_bound):
            raise DegreeTooLarge(
                f"degree bound must be a power of two >= 2, got {self.degree_bound}"
            )

        if self.final_size is None:
            object.__setattr__(self, "final_size", n >> log2(self.degree_bound))
        elif not is_power_of_two(self.final_size) or self.final_size >= n:
            raise InvalidDomainSize(
                f"final size {self.final_size} must be a power of two below domain size {n}"
            )

        if 1 << self.num_rounds != self.degree_bound:
            raise DegreeTooLarge(
                f"{self.num_rounds} fold rounds do not match degree bound {self.degree_bound}"
            )

    @classmethod
    def from_degree(
        cls,
        claimed_degree: int,
        blowup_factor: int,
        num_queries: int,
        final_size: Optional[int] = None,
    ) -> "FriParameters":
        """Parameters for polynomials of degree <= claimed_degree at the given blowup.

        The degree bound is claimed_degree + 1 rounded up to a power of two.
        """
        if claimed_degree < 0:
            raise ValueError(f"claimed degree must be non-negative, got {claimed_degree}")
        if blowup_factor < 1:
            raise ValueError(f"blowup factor must be positive, got {blowup_factor}")
        degree_bound = max(2, next_power_of_two(claimed_degree + 1))
        domain_size = max(2, next_power_of_two(degree_bound * blowup_factor))
        return cls(domain_size, degree_bound, num_queries, final_size)

    @property
    def num_rounds(self) -> int:
        return log2(self.domain_size) - log2(self.final_size)

    @property
    def rate(self) -> float:
        """Code rate degree_bound / domain_size."""
        return self.degree_bound / self.domain_size

    def layer_size(self, round_idx: int) -> int:
        """Size of layer round_idx, for 0 <= round_idx <= num_rounds."""
        if not 0 <= round_idx <= self.num_rounds:
            raise ValueError(f"round {round_idx} out of range [0, {self.num_rounds}]")
        return self.domain_size >> round_idx

    def soundness_error(self, distance: float) -> float:
        """Query-phase bound (1 - distance)^Q on accepting a word at relative distance."""
        if not 0.0 <= distance <= 1.0:
            raise ValueError(f"relative distance must be in [0, 1], got {distance}")
        return (1.0 - distance) ** self.query_count
