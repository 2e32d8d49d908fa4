"""FRI verifier.

Replays the prover's transcript to recover the fold challenges and query
indices, then checks every query independently:

1. Both opened positions of every layer authenticate against the layer root.
2. Folding the pair from layer i gives the value opened at layer i+1.
3. Folding the pair from the last committed layer gives the final constant.

Any failed check rejects the proof. Malformed proofs raise MalformedProof
before any check runs.
"""

import logging
from typing import List, Optional, Sequence

from fri_pcs.errors import RejectReason
from fri_pcs.primitives import merkle_tree
from fri_pcs.primitives.field import FieldElement, PrimeField
from fri_pcs.primitives.hashing import HashFunction
from fri_pcs.primitives.ntt import EvaluationDomain
from fri_pcs.primitives.workers import parallel_map
from fri_pcs.protocol.config import FriConfig, FriParameters
from fri_pcs.protocol.fri import FRI, absorb_public_instance
from fri_pcs.protocol.proof import FriProof, QueryOpening, check_proof_structure

logger = logging.getLogger(__name__)


def verify(
    proof: FriProof,
    domain_size: int,
    degree_bound: int,
    query_count: int,
    config: Optional[FriConfig] = None,
    generator: Optional[int] = None,
) -> bool:
    """Accept (True) or reject (False) a FRI proof.

    Args:
        proof: Proof produced by prove
        domain_size: Size of the initial evaluation domain
        degree_bound: Claimed bound, deg < degree_bound, a power of two
        query_count: Number of queries the proof must contain
        config: Must equal the prover's configuration; FriConfig() when None,
            the same default prove uses
        generator: Domain generator, when the prover used a non-canonical one

    Raises:
        ConstructionError: On invalid parameters or a malformed proof
    """
    cfg = config or FriConfig()
    field = cfg.field
    hasher = cfg.hasher

    params = FriParameters(domain_size, degree_bound, query_count, cfg.final_size)
    if generator is None:
        domain = EvaluationDomain.of_size(field, domain_size)
    else:
        domain = EvaluationDomain(field, domain_size, generator)

    check_proof_structure(proof, params, field, hasher.digest_size)

    # --- Transcript Replay ---
    transcript = cfg.transcript()
    absorb_public_instance(transcript, params, domain)

    challenges: List[FieldElement] = []
    for root in proof.roots:
        transcript.absorb(root)
        challenges.append(transcript.challenge_field_element(field))

    transcript.absorb(field.encode(proof.final_value))
    query_indices = transcript.challenge_indices(params.query_count, params.domain_size)

    domains = [domain]
    for _ in range(params.num_rounds - 1):
        domains.append(domains[-1].squared())

    # --- Query Checks ---
    def check(item: tuple) -> Optional[RejectReason]:
        idx, opening = item
        return _verify_query(idx, opening, proof, domains, challenges, field, hasher)

    reasons = parallel_map(check, list(zip(query_indices, proof.openings)), cfg.max_workers)

    for q, reason in enumerate(reasons):
        if reason is not None:
            logger.debug("rejecting proof: query %d (index %d) failed with %s",
                         q, query_indices[q], reason.value)
            return False

    return True


def _verify_query(
    idx: int,
    opening: QueryOpening,
    proof: FriProof,
    domains: Sequence[EvaluationDomain],
    challenges: Sequence[FieldElement],
    field: PrimeField,
    hasher: HashFunction,
) -> Optional[RejectReason]:
    """Check one query across all layers; None means it passed."""
    positions = []
    for i, layer in enumerate(opening.layers):
        n_i = domains[i].size
        pos = FRI.layer_position(idx, n_i)
        sib = FRI.sibling_position(pos, n_i)
        root = proof.roots[i]
        if not merkle_tree.verify(root, pos, layer.value, layer.path, field, hasher):
            return RejectReason.MERKLE_PATH_MISMATCH
        if not merkle_tree.verify(root, sib, layer.sibling_value, layer.sibling_path, field, hasher):
            return RejectReason.MERKLE_PATH_MISMATCH
        positions.append(pos)

    n_layers = len(opening.layers)
    for i, layer in enumerate(opening.layers):
        pos = positions[i]
        half = domains[i].size // 2
        k = pos % half
        if pos < half:
            lo, hi = layer.value, layer.sibling_value
        else:
            lo, hi = layer.sibling_value, layer.value

        folded = int(FRI.fold_pair(field, lo, hi, domains[i].element(k), challenges[i]))

        if i + 1 < n_layers:
            if folded != opening.layers[i + 1].value:
                return RejectReason.FOLD_CONSISTENCY_MISMATCH
        elif folded != proof.final_value:
            return RejectReason.FINAL_VALUE_MISMATCH

    return None
