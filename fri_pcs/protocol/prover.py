"""FRI prover: commit, fold, and query phases."""

import logging
from typing import List, Optional, Sequence

import numpy as np

from fri_pcs.errors import InvalidInputLength
from fri_pcs.primitives.field import ElementLike, FieldElement
from fri_pcs.primitives.ntt import EvaluationDomain
from fri_pcs.protocol.config import FriConfig, FriParameters
from fri_pcs.protocol.fri import FRI, FriLayer, absorb_public_instance
from fri_pcs.protocol.proof import FriProof

logger = logging.getLogger(__name__)


class FriProver:
    """Builds a FRI proof that committed evaluations are close to low degree."""

    def __init__(self, params: FriParameters, config: Optional[FriConfig] = None):
        self.params = params
        self.config = config or FriConfig()

    def prove(self, evaluations: Sequence[ElementLike], domain: EvaluationDomain) -> FriProof:
        cfg = self.config
        params = self.params
        field = cfg.field

        if domain.field != field:
            raise ValueError(f"domain field GF({domain.field.p}) does not match config field GF({field.p})")
        if domain.size != params.domain_size:
            raise InvalidInputLength(
                f"domain size {domain.size} does not match parameters ({params.domain_size})"
            )
        if len(evaluations) != domain.size:
            raise InvalidInputLength(
                f"expected {domain.size} evaluations, got {len(evaluations)}"
            )

        transcript = cfg.transcript()
        absorb_public_instance(transcript, params, domain)

        # --- Commit-Fold Loop ---
        # Each iteration: merkelize -> absorb root -> draw challenge -> fold
        layers: List[FriLayer] = []
        current = field.array(evaluations)
        current_domain = domain

        for fri_round in range(params.num_rounds):
            layer = FRI.merkelize(current, current_domain, cfg)
            layers.append(layer)
            transcript.absorb(layer.root)
            logger.debug("committed layer %d (size %d)", fri_round, current_domain.size)

            challenge = transcript.challenge_field_element(field)
            current = FRI.fold(current, current_domain, challenge)
            current_domain = current_domain.squared()

        # --- Finalize ---
        final_value = int(current[0])
        if not _is_constant(current):
            logger.warning(
                "final layer of size %d is not constant; the proof will not verify",
                len(current),
            )
        transcript.absorb(field.encode(final_value))

        # --- Query Phase ---
        query_indices = transcript.challenge_indices(params.query_count, params.domain_size)
        logger.debug("query indices: %s", query_indices)
        openings = FRI.prove_queries(query_indices, layers)

        return FriProof(
            roots=tuple(layer.root for layer in layers),
            final_value=final_value,
            openings=tuple(openings),
        )


def prove(
    evaluations: Sequence[ElementLike],
    domain: EvaluationDomain,
    degree_bound: int,
    query_count: int,
    config: Optional[FriConfig] = None,
) -> FriProof:
    """Prove that evaluations over domain come from a polynomial of degree < degree_bound.

    degree_bound must be a power of two; see FriParameters. Without a config
    both prove and verify use FriConfig(), so a domain over any field other
    than Goldilocks needs an explicit config passed to both.
    """
    config = config or FriConfig()
    params = FriParameters(domain.size, degree_bound, query_count, config.final_size)
    return FriProver(params, config).prove(evaluations, domain)


def _is_constant(values: FieldElement) -> bool:
    raw = values.view(np.ndarray)
    return bool(np.all(raw == raw[0]))
