"""Binary Merkle tree commitment over field elements."""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from fri_pcs.errors import NonPowerOfTwoLeafCount
from fri_pcs.primitives.field import ElementLike, PrimeField
from fri_pcs.primitives.hashing import HashFunction
from fri_pcs.primitives.utils import is_power_of_two, log2
from fri_pcs.primitives.workers import chunks, parallel_map

# --- Constants ---

LEAF_TAG = b"\x00"
NODE_TAG = b"\x01"

# --- Type Aliases ---

Digest = bytes
MerklePath = Tuple[Digest, ...]


# --- Data Classes ---

@dataclass(frozen=True)
class QueryProof:
    """Opened leaf value and its authentication path.

    Attributes:
        value: Canonical leaf value
        path: Sibling digests from the leaf level up to just below the root
    """
    value: int
    path: MerklePath


# --- Merkle Tree ---

class MerkleTree:
    """Binary Merkle tree with all nodes in one flat list.

    Layout: the n leaf digests first, then each level above it, root last,
    for 2n - 1 nodes in total. Leaves hash as H(0x00 || encode(v)) and
    internal nodes as H(0x01 || left || right).
    """

    def __init__(
        self,
        field: PrimeField,
        hasher: Optional[HashFunction] = None,
        max_workers: int = 1,
    ) -> None:
        self.field = field
        self.hasher = hasher or HashFunction()
        self.max_workers = max_workers

        self.height = 0
        self.nodes: List[Digest] = []
        self.source_data: Optional[List[int]] = None

    # --- Core Operations ---

    def merkelize(self, values: Sequence[ElementLike]) -> None:
        """Build the tree over values, one leaf per value."""
        n = len(values)
        if not is_power_of_two(n):
            raise NonPowerOfTwoLeafCount(f"leaf count must be a power of two, got {n}")

        self.height = n
        self.source_data = [int(v) % self.field.p for v in values]

        # Leaf hashing is independent per leaf; spread contiguous chunks over workers
        leaf_chunks = list(chunks(self.source_data, self.max_workers))
        hashed = parallel_map(self._hash_leaves, leaf_chunks, self.max_workers)
        self.nodes = [d for chunk in hashed for d in chunk]

        offset = 0
        pending = n
        while pending > 1:
            for i in range(pending // 2):
                left = self.nodes[offset + 2 * i]
                right = self.nodes[offset + 2 * i + 1]
                self.nodes.append(self.hash_node(left, right))
            offset += pending
            pending //= 2

    def get_root(self) -> Digest:
        """Return the Merkle root commitment."""
        if not self.nodes:
            raise ValueError("tree has not been built")
        return self.nodes[-1]

    def get_merkle_path(self, idx: int) -> MerklePath:
        """Sibling digests for leaf idx, bottom-up."""
        self._check_index(idx)
        path = []
        offset = 0
        pending = self.height
        while pending > 1:
            path.append(self.nodes[offset + (idx ^ 1)])
            offset += pending
            pending //= 2
            idx //= 2
        return tuple(path)

    def get_query_proof(self, idx: int) -> QueryProof:
        """Leaf value at idx together with its authentication path."""
        self._check_index(idx)
        return QueryProof(value=self.source_data[idx], path=self.get_merkle_path(idx))

    def open(self, idx: int) -> Tuple[int, MerklePath]:
        proof = self.get_query_proof(idx)
        return proof.value, proof.path

    def get_merkle_proof_length(self) -> int:
        """Number of levels in a Merkle proof."""
        return log2(self.height) if self.height else 0

    # --- Hashing ---

    def hash_leaf(self, value: ElementLike) -> Digest:
        return self.hasher.digest(LEAF_TAG, self.field.encode(value))

    def hash_node(self, left: Digest, right: Digest) -> Digest:
        return self.hasher.digest(NODE_TAG, left, right)

    def _hash_leaves(self, values: Sequence[int]) -> List[Digest]:
        return [self.hash_leaf(v) for v in values]

    # --- Verification ---

    @staticmethod
    def verify_group_proof(
        root: Digest,
        path: Sequence[Digest],
        idx: int,
        value: ElementLike,
        field: PrimeField,
        hasher: Optional[HashFunction] = None,
    ) -> bool:
        """Recompute the root from a leaf and its path and compare.

        Returns False instead of raising for out-of-range indices or values
        and for digests of the wrong size.
        """
        hasher = hasher or HashFunction()
        size = hasher.digest_size

        try:
            value = int(value)
        except (TypeError, ValueError):
            return False
        if not 0 <= value < field.p:
            return False
        if not isinstance(idx, int) or not 0 <= idx < (1 << len(path)):
            return False
        if not isinstance(root, bytes) or len(root) != size:
            return False
        if any(not isinstance(s, bytes) or len(s) != size for s in path):
            return False

        computed = hasher.digest(LEAF_TAG, field.encode(value))
        for sibling in path:
            if idx & 1:
                computed = hasher.digest(NODE_TAG, sibling, computed)
            else:
                computed = hasher.digest(NODE_TAG, computed, sibling)
            idx >>= 1

        return computed == root

    # --- Internal Helpers ---

    def _check_index(self, idx: int) -> None:
        if not 0 <= idx < self.height:
            raise IndexError(f"leaf index {idx} out of range [0, {self.height})")


# --- Module API ---

def commit(
    values: Sequence[ElementLike],
    field: PrimeField,
    hasher: Optional[HashFunction] = None,
    max_workers: int = 1,
) -> Tuple[MerkleTree, Digest]:
    """Build a tree over values and return it with its root."""
    tree = MerkleTree(field, hasher, max_workers)
    tree.merkelize(values)
    return tree, tree.get_root()


def verify(
    root: Digest,
    index: int,
    value: ElementLike,
    path: Sequence[Digest],
    field: PrimeField,
    hasher: Optional[HashFunction] = None,
) -> bool:
    """Check that value sits at index under root."""
    return MerkleTree.verify_group_proof(root, path, index, value, field, hasher)
