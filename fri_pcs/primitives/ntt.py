"""Evaluation domains and the radix-2 Number Theoretic Transform."""

from dataclasses import dataclass
from functools import cached_property

import numpy as np

from fri_pcs.errors import InvalidDomainSize
from fri_pcs.primitives.field import FieldElement, PrimeField
from fri_pcs.primitives.utils import bit_reverse_permutation, is_power_of_two, log2

# --- Evaluation Domain ---

@dataclass(frozen=True)
class EvaluationDomain:
    """Multiplicative subgroup {1, w, w^2, ..., w^(size-1)} of GF(p)*.

    Attributes:
        field: Field the domain lives in
        size: Number of points, a power of two dividing p - 1
        generator: Primitive size-th root of unity w, as a canonical int
    """
    field: PrimeField
    size: int
    generator: int

    def __post_init__(self) -> None:
        p = self.field.p
        if not is_power_of_two(self.size) or (p - 1) % self.size != 0:
            raise InvalidDomainSize(f"domain size {self.size} is not a power of two dividing {p - 1}")
        if not 0 < self.generator < p:
            raise InvalidDomainSize(f"generator {self.generator} is not a nonzero field element")

        w = self.field.element(self.generator)
        if w ** self.size != 1:
            raise InvalidDomainSize(f"generator {self.generator} is not a {self.size}-th root of unity")
        if self.size > 1 and w ** (self.size // 2) == 1:
            raise InvalidDomainSize(f"generator {self.generator} is not a primitive {self.size}-th root of unity")

    @classmethod
    def of_size(cls, field: PrimeField, size: int) -> "EvaluationDomain":
        """Domain of the given size with the field's canonical generator."""
        return cls(field, size, int(field.root_of_unity(size)))

    @property
    def log_size(self) -> int:
        return log2(self.size)

    @property
    def omega(self) -> FieldElement:
        return self.field.element(self.generator)

    def element(self, i: int) -> FieldElement:
        """The i-th domain point, w^i."""
        return self.omega ** (i % self.size)

    @cached_property
    def elements(self) -> FieldElement:
        """All domain points in index order."""
        return _precompute_roots(self.field, self.omega, self.size)

    def squared(self) -> "EvaluationDomain":
        """Domain {d^2 : d in self}, half the size, generated by w^2."""
        if self.size < 2:
            raise InvalidDomainSize("cannot halve a domain of size 1")
        return EvaluationDomain(self.field, self.size // 2, int(self.omega ** 2))


# --- NTT Engine ---

class NTT:
    """Iterative radix-2 NTT over one evaluation domain.

    Inputs are permuted into bit-reversed order once, then log2(n) butterfly
    stages run. Stage s combines pairs 2^(s-1) apart with twiddle w_s^i, where
    w_s is a primitive 2^s-th root of unity. Every stage is one vectorized
    numpy operation over all blocks.
    """

    def __init__(self, domain: EvaluationDomain) -> None:
        self.domain = domain
        self.field = domain.field
        self.n = domain.size
        self.n_bits = domain.log_size

        half = max(self.n // 2, 1)
        self.roots = _precompute_roots(self.field, domain.omega, half)
        self.inv_roots = _precompute_roots(self.field, domain.omega ** -1, half)
        self.rev = bit_reverse_permutation(self.n)
        self.n_inv = self.field.GF(self.n) ** -1

    def ntt(self, coeffs: FieldElement) -> FieldElement:
        """Forward NTT: coefficients -> evaluations at w^0, ..., w^(n-1)."""
        return self._transform(self._check_input(coeffs), self.roots)

    def intt(self, evals: FieldElement) -> FieldElement:
        """Inverse NTT: evaluations -> coefficients."""
        return self._transform(self._check_input(evals), self.inv_roots) * self.n_inv

    def _check_input(self, values) -> FieldElement:
        values = self.field.array(values)
        if values.ndim != 1 or values.shape[0] != self.n:
            raise InvalidDomainSize(f"input length {values.size} does not match domain size {self.n}")
        return values

    def _transform(self, values: FieldElement, roots: FieldElement) -> FieldElement:
        GF = self.field.GF
        a = values[self.rev]

        half = 1
        while half < self.n:
            block = 2 * half
            twiddles = roots[:: self.n // block][:half]

            blocks = a.reshape(-1, block)
            u = blocks[:, :half]
            v = blocks[:, half:] * twiddles

            out = GF.Zeros(blocks.shape)
            out[:, :half] = u + v
            out[:, half:] = u - v
            a = out.reshape(-1)
            half = block

        return a


# --- Module API ---

def forward(coeffs, domain: EvaluationDomain) -> FieldElement:
    """Evaluate the polynomial with the given n coefficients over the domain."""
    return NTT(domain).ntt(coeffs)


def inverse(evaluations, domain: EvaluationDomain) -> FieldElement:
    """Coefficients of the unique polynomial of degree < n taking these values."""
    return NTT(domain).intt(evaluations)


# --- Helpers ---

def _precompute_roots(field: PrimeField, omega: FieldElement, n_roots: int) -> FieldElement:
    """Precompute roots of unity: roots[k] = omega^k."""
    roots = field.GF.Zeros(n_roots)
    roots[0] = 1
    for i in range(1, n_roots):
        roots[i] = roots[i - 1] * omega
    return roots
