"""Primitives - Field, transform, hashing and commitment building blocks."""

from fri_pcs.primitives.field import (
    BABYBEAR_PRIME,
    GOLDILOCKS_PRIME,
    FieldElement,
    PrimeField,
    batch_inverse,
    get_field,
)
from fri_pcs.primitives.hashing import HashFunction
from fri_pcs.primitives.merkle_tree import MerkleTree, QueryProof
from fri_pcs.primitives.ntt import NTT, EvaluationDomain
from fri_pcs.primitives.polynomial import Polynomial
from fri_pcs.primitives.transcript import Transcript

__all__ = [
    "BABYBEAR_PRIME",
    "GOLDILOCKS_PRIME",
    "FieldElement",
    "PrimeField",
    "batch_inverse",
    "get_field",
    "HashFunction",
    "MerkleTree",
    "QueryProof",
    "NTT",
    "EvaluationDomain",
    "Polynomial",
    "Transcript",
]
