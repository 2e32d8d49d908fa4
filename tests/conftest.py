"""Shared fixtures for the fri_pcs test suite."""

import pytest

from fri_pcs.primitives.field import BABYBEAR_PRIME, PrimeField, get_field
from fri_pcs.primitives.ntt import EvaluationDomain

SMALL_PRIME = 97


@pytest.fixture(scope="session")
def small_field() -> PrimeField:
    """GF(97): 96 = 2^5 * 3, so power-of-two domains up to 32 exist."""
    return get_field(SMALL_PRIME)


@pytest.fixture(scope="session")
def babybear() -> PrimeField:
    return get_field(BABYBEAR_PRIME)


@pytest.fixture(scope="session")
def small_domain(small_field: PrimeField) -> EvaluationDomain:
    return EvaluationDomain.of_size(small_field, 8)
