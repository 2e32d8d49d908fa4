"""FRI folding protocol."""

from dataclasses import dataclass
from typing import List, Sequence

from fri_pcs.primitives.field import FieldElement, PrimeField, batch_inverse
from fri_pcs.primitives.merkle_tree import Digest, MerkleTree
from fri_pcs.primitives.ntt import EvaluationDomain
from fri_pcs.primitives.transcript import Transcript
from fri_pcs.protocol.config import FriConfig, FriParameters
from fri_pcs.protocol.proof import LayerOpening, QueryOpening


# --- Layers ---

@dataclass(frozen=True, eq=False)
class FriLayer:
    """One committed layer: its domain, evaluations, and Merkle tree."""
    domain: EvaluationDomain
    evaluations: FieldElement
    tree: MerkleTree

    @property
    def size(self) -> int:
        return self.domain.size

    @property
    def root(self) -> Digest:
        return self.tree.get_root()


# --- Public Instance ---

def absorb_public_instance(
    transcript: Transcript,
    params: FriParameters,
    domain: EvaluationDomain,
) -> None:
    """Bind the transcript to the field, domain and instance shape."""
    field = domain.field
    transcript.absorb_int(field.p)
    transcript.absorb_int(domain.size)
    transcript.absorb(field.encode(domain.generator))
    transcript.absorb_int(params.degree_bound)
    transcript.absorb_int(params.query_count)
    transcript.absorb_int(params.final_size)


# --- FRI Protocol ---

class FRI:
    """FRI protocol: folding, commitment, and query openings.

    Layer i has n_i = n / 2^i points. Point k and point k + n_i/2 are y and -y,
    and both fold into point k of layer i+1, which sits at y^2.
    """

    @staticmethod
    def fold(
        evaluations: FieldElement,
        domain: EvaluationDomain,
        challenge: FieldElement,
    ) -> FieldElement:
        """Fold a layer in half.

        f'(y^2) = ((f(y) + f(-y)) + beta * (f(y) - f(-y)) / y) / 2
        for y over the first half of the domain.
        """
        GF = domain.field.GF
        half = domain.size // 2
        lo = evaluations[:half]
        hi = evaluations[half:]

        inv_y = batch_inverse(domain.elements[:half])
        two_inv = GF(2) ** -1
        return ((lo + hi) + challenge * (lo - hi) * inv_y) * two_inv

    @staticmethod
    def fold_pair(
        field: PrimeField,
        lo: int,
        hi: int,
        y: FieldElement,
        challenge: FieldElement,
    ) -> FieldElement:
        """Fold a single pair f(y) = lo, f(-y) = hi."""
        lo, hi = field.element(lo), field.element(hi)
        return field.div((lo + hi) + challenge * field.div(lo - hi, y), 2)

    @staticmethod
    def merkelize(
        evaluations: FieldElement,
        domain: EvaluationDomain,
        config: FriConfig,
    ) -> FriLayer:
        """Commit to a layer via Merkle tree."""
        tree = MerkleTree(domain.field, config.hasher, config.max_workers)
        tree.merkelize(evaluations)
        return FriLayer(domain, evaluations, tree)

    @staticmethod
    def layer_position(query_idx: int, layer_size: int) -> int:
        """Queried position in a layer of the given size."""
        return query_idx % layer_size

    @staticmethod
    def sibling_position(position: int, layer_size: int) -> int:
        """Position of the -y partner of the point at position."""
        return (position + layer_size // 2) % layer_size

    @staticmethod
    def prove_queries(query_indices: Sequence[int], layers: Sequence[FriLayer]) -> List[QueryOpening]:
        """Open both fold positions in every layer for each query."""
        openings = []
        for idx in query_indices:
            layer_openings = []
            for layer in layers:
                pos = FRI.layer_position(idx, layer.size)
                sib = FRI.sibling_position(pos, layer.size)
                proof = layer.tree.get_query_proof(pos)
                sib_proof = layer.tree.get_query_proof(sib)
                layer_openings.append(LayerOpening(
                    value=proof.value,
                    path=proof.path,
                    sibling_value=sib_proof.value,
                    sibling_path=sib_proof.path,
                ))
            openings.append(QueryOpening(layers=tuple(layer_openings)))
        return openings
