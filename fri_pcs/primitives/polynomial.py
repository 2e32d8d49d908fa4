"""Coefficient-form polynomials over a prime field.

Only what the commitment scheme and its tests need: evaluation at a point,
evaluation over a domain, interpolation from a domain, and multiplication.
"""

from dataclasses import dataclass
from typing import Sequence

from fri_pcs.errors import DegreeTooLarge
from fri_pcs.primitives import ntt
from fri_pcs.primitives.field import ElementLike, FieldElement, PrimeField
from fri_pcs.primitives.ntt import EvaluationDomain
from fri_pcs.primitives.utils import next_power_of_two


@dataclass(frozen=True)
class Polynomial:
    """Polynomial sum(coeffs[i] * X^i), coefficients stored as canonical ints."""
    field: PrimeField
    coeffs: tuple[int, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "coeffs", tuple(int(c) % self.field.p for c in self.coeffs))

    @classmethod
    def from_coeffs(cls, field: PrimeField, coeffs: Sequence[ElementLike]) -> "Polynomial":
        return cls(field, tuple(int(c) for c in coeffs))

    @classmethod
    def interpolate(cls, evaluations: Sequence[ElementLike], domain: EvaluationDomain) -> "Polynomial":
        """Unique polynomial of degree < domain.size through the given values."""
        coeffs = ntt.inverse(evaluations, domain)
        return cls(domain.field, tuple(int(c) for c in coeffs)).trimmed()

    @property
    def degree(self) -> int:
        """Degree, with -1 standing for the zero polynomial."""
        for i in range(len(self.coeffs) - 1, -1, -1):
            if self.coeffs[i] != 0:
                return i
        return -1

    def trimmed(self) -> "Polynomial":
        """Same polynomial without trailing zero coefficients."""
        return Polynomial(self.field, self.coeffs[: self.degree + 1])

    def evaluate(self, x: ElementLike) -> FieldElement:
        """Horner evaluation at a single point."""
        x = self.field.element(x)
        acc = self.field.zero()
        for c in reversed(self.coeffs):
            acc = acc * x + c
        return acc

    def evaluate_over(self, domain: EvaluationDomain) -> FieldElement:
        """Evaluations at every domain point, in domain index order."""
        if len(self.coeffs) > domain.size:
            raise DegreeTooLarge(
                f"{len(self.coeffs)} coefficients do not fit a domain of size {domain.size}"
            )
        padded = domain.field.GF.Zeros(domain.size)
        if self.coeffs:
            padded[: len(self.coeffs)] = list(self.coeffs)
        return ntt.forward(padded, domain)

    def multiply(self, other: "Polynomial") -> "Polynomial":
        """Product via pointwise multiplication over a large enough domain."""
        if self.field != other.field:
            raise ValueError("cannot multiply polynomials over different fields")
        if self.degree < 0 or other.degree < 0:
            return Polynomial(self.field, ())

        size = next_power_of_two(self.degree + other.degree + 1)
        domain = EvaluationDomain.of_size(self.field, size)
        product = self.trimmed().evaluate_over(domain) * other.trimmed().evaluate_over(domain)
        return Polynomial.interpolate(product, domain)

