"""Protocol - FRI commit, fold and query."""

from fri_pcs.protocol.config import PROTOCOL_ID, FriConfig, FriParameters
from fri_pcs.protocol.fri import FRI, FriLayer
from fri_pcs.protocol.proof import (
    FriProof,
    LayerOpening,
    QueryOpening,
    from_bytes,
    proof_from_json,
    proof_to_json,
    to_bytes,
    validate_proof_structure,
)
from fri_pcs.protocol.prover import FriProver, prove
from fri_pcs.protocol.verifier import verify

__all__ = [
    "PROTOCOL_ID",
    "FriConfig",
    "FriParameters",
    "FRI",
    "FriLayer",
    "FriProof",
    "LayerOpening",
    "QueryOpening",
    "from_bytes",
    "proof_from_json",
    "proof_to_json",
    "to_bytes",
    "validate_proof_structure",
    "FriProver",
    "prove",
    "verify",
]
