"""Prime field GF(p) arithmetic.

Uses galois for all field arithmetic. PrimeField wraps a galois field class
and adds what the protocol needs on top of it: canonical fixed-width
encoding, roots of unity for power-of-two domains, and an explicit error on
division by zero.

Field instances are cached per modulus and are safe to share read-only
between threads.
"""

import functools
from typing import Iterable, Union

import galois
import numpy as np

from fri_pcs.errors import DivisionByZero, InvalidDomainSize
from fri_pcs.primitives.utils import is_power_of_two

# --- Field Moduli ---

GOLDILOCKS_PRIME = 0xFFFFFFFF00000001
"""2^64 - 2^32 + 1, two-adicity 32."""

BABYBEAR_PRIME = 0x78000001
"""2^31 - 2^27 + 1, two-adicity 27."""

# --- Type Aliases ---

FieldElement = galois.FieldArray
ElementLike = Union[int, galois.FieldArray]


# --- Prime Field ---

class PrimeField:
    """Exact arithmetic modulo a prime p.

    Elements are galois FieldArray scalars (or arrays, for vectorized use).
    Plain Python ints are accepted everywhere an element is expected and are
    reduced mod p first.
    """

    def __init__(self, modulus: int) -> None:
        if modulus < 2 or not galois.is_prime(modulus):
            raise ValueError(f"modulus must be prime, got {modulus}")

        self.p = modulus
        self.GF = galois.GF(modulus)
        self.byte_width = (modulus.bit_length() + 7) // 8

        # Largest k such that 2^k divides p - 1
        self.two_adicity = ((modulus - 1) & -(modulus - 1)).bit_length() - 1

    def __repr__(self) -> str:
        return f"PrimeField({self.p:#x})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, PrimeField) and other.p == self.p

    def __hash__(self) -> int:
        return hash(("PrimeField", self.p))

    # --- Element Construction ---

    def element(self, value: ElementLike) -> FieldElement:
        """Field element from an int (reduced mod p) or an existing element."""
        if isinstance(value, self.GF):
            return value
        return self.GF(int(value) % self.p)

    def array(self, values: Iterable[ElementLike]) -> FieldElement:
        """Field vector from ints or elements."""
        if isinstance(values, self.GF):
            return values
        return self.GF([int(v) % self.p for v in values])

    def zero(self) -> FieldElement:
        return self.GF(0)

    def one(self) -> FieldElement:
        return self.GF(1)

    def random(self, size: int | None = None, seed: int | None = None) -> FieldElement:
        if size is None:
            return self.GF.Random(seed=seed)
        return self.GF.Random(size, seed=seed)

    # --- Arithmetic ---

    def add(self, a: ElementLike, b: ElementLike) -> FieldElement:
        return self.element(a) + self.element(b)

    def sub(self, a: ElementLike, b: ElementLike) -> FieldElement:
        return self.element(a) - self.element(b)

    def mul(self, a: ElementLike, b: ElementLike) -> FieldElement:
        return self.element(a) * self.element(b)

    def neg(self, a: ElementLike) -> FieldElement:
        return -self.element(a)

    def inv(self, a: ElementLike) -> FieldElement:
        """Multiplicative inverse, a^(p-2) mod p."""
        a = self.element(a)
        if np.any(a.view(np.ndarray) == 0):
            raise DivisionByZero("zero has no multiplicative inverse")
        return a ** -1

    def div(self, a: ElementLike, b: ElementLike) -> FieldElement:
        return self.element(a) * self.inv(b)

    def pow(self, base: ElementLike, exponent: int) -> FieldElement:
        base = self.element(base)
        if exponent < 0:
            return self.inv(base) ** (-exponent)
        return base ** exponent

    # --- Encoding ---

    def encode(self, a: ElementLike) -> bytes:
        """Fixed-width big-endian encoding of the canonical representative."""
        return (int(a) % self.p).to_bytes(self.byte_width, byteorder="big")

    def decode(self, data: bytes) -> FieldElement:
        if len(data) != self.byte_width:
            raise ValueError(f"encoded element must be {self.byte_width} bytes, got {len(data)}")
        value = int.from_bytes(data, byteorder="big")
        if value >= self.p:
            raise ValueError(f"non-canonical encoding: {value} >= {self.p}")
        return self.GF(value)

    def is_canonical(self, value: object) -> bool:
        return isinstance(value, int) and not isinstance(value, bool) and 0 <= value < self.p

    # --- Roots of Unity ---

    def root_of_unity(self, n: int) -> FieldElement:
        """Primitive n-th root of unity, g^((p-1)/n) for the primitive element g."""
        if not is_power_of_two(n) or (self.p - 1) % n != 0:
            raise InvalidDomainSize(f"no multiplicative subgroup of size {n} in GF({self.p})")
        return self.GF.primitive_element ** ((self.p - 1) // n)


@functools.lru_cache(maxsize=None)
def get_field(modulus: int = GOLDILOCKS_PRIME) -> PrimeField:
    """Shared PrimeField instance for a modulus."""
    return PrimeField(modulus)


# --- Montgomery Batch Inversion ---

def batch_inverse(values: FieldElement) -> FieldElement:
    """Invert every element of values with a single field inversion.

    The fold needs 1/y for each point of the first half of a layer; running
    products let one inversion of their total serve all of them.

    Raises:
        DivisionByZero: If any element is zero
    """
    n = len(values)
    if n == 0:
        return values
    if np.any(values.view(np.ndarray) == 0):
        raise DivisionByZero("cannot batch-invert a vector containing zero")
    if n == 1:
        return values ** -1

    GF = type(values)
    prefix = GF.Zeros(n)
    prefix[0] = values[0]
    for i in range(1, n):
        prefix[i] = prefix[i - 1] * values[i]

    # acc holds (values[0] * ... * values[i])^-1 at the top of each step
    acc = prefix[-1] ** -1
    inverses = GF.Zeros(n)
    for i in range(n - 1, 0, -1):
        inverses[i] = acc * prefix[i - 1]
        acc = acc * values[i]
    inverses[0] = acc
    return inverses
