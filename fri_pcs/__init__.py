"""
FRI Polynomial Commitment Scheme

Commits to the evaluations of a polynomial over a multiplicative subgroup of
a prime field and proves, non-interactively, that they are close to a
polynomial of bounded degree.

This package provides:
- Prime field arithmetic (via galois)
- Radix-2 NTT over power-of-two evaluation domains
- Binary Merkle tree commitments (via hashlib)
- Fiat-Shamir transcript
- FRI prover and verifier
- JSON and binary proof serialization

Usage:
    from fri_pcs import EvaluationDomain, Polynomial, get_field, prove, verify

    field = get_field()
    domain = EvaluationDomain.of_size(field, 64)
    evals = Polynomial.from_coeffs(field, range(8)).evaluate_over(domain)
    proof = prove(evals, domain, degree_bound=8, query_count=16)
    assert verify(proof, domain_size=64, degree_bound=8, query_count=16)
"""

# Errors
from fri_pcs.errors import (
    ConstructionError,
    DegreeTooLarge,
    DivisionByZero,
    FriError,
    InvalidDomainSize,
    InvalidInputLength,
    MalformedProof,
    NonPowerOfTwoLeafCount,
    RejectReason,
)

# Primitives
from fri_pcs.primitives.field import (
    BABYBEAR_PRIME,
    GOLDILOCKS_PRIME,
    PrimeField,
    batch_inverse,
    get_field,
)
from fri_pcs.primitives.hashing import HashFunction
from fri_pcs.primitives.merkle_tree import MerkleTree, commit
from fri_pcs.primitives.ntt import EvaluationDomain, forward, inverse
from fri_pcs.primitives.polynomial import Polynomial
from fri_pcs.primitives.transcript import Transcript

# Protocol
from fri_pcs.protocol.config import PROTOCOL_ID, FriConfig, FriParameters
from fri_pcs.protocol.proof import (
    FriProof,
    LayerOpening,
    QueryOpening,
    from_bytes,
    proof_from_json,
    proof_to_json,
    to_bytes,
)
from fri_pcs.protocol.prover import prove
from fri_pcs.protocol.verifier import verify

__version__ = "0.1.0"
__all__ = [
    # Errors
    "ConstructionError",
    "DegreeTooLarge",
    "DivisionByZero",
    "FriError",
    "InvalidDomainSize",
    "InvalidInputLength",
    "MalformedProof",
    "NonPowerOfTwoLeafCount",
    "RejectReason",
    # Field
    "BABYBEAR_PRIME",
    "GOLDILOCKS_PRIME",
    "PrimeField",
    "batch_inverse",
    "get_field",
    # Hash and Merkle
    "HashFunction",
    "MerkleTree",
    "commit",
    # NTT and polynomials
    "EvaluationDomain",
    "forward",
    "inverse",
    "Polynomial",
    # Transcript
    "Transcript",
    # FRI
    "PROTOCOL_ID",
    "FriConfig",
    "FriParameters",
    "FriProof",
    "LayerOpening",
    "QueryOpening",
    "from_bytes",
    "proof_from_json",
    "proof_to_json",
    "to_bytes",
    "prove",
    "verify",
]
