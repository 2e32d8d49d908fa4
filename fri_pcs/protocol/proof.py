"""FRI proof data structures, structural validation and serialization."""

import struct
from dataclasses import dataclass
from typing import Any

from fri_pcs.errors import MalformedProof
from fri_pcs.primitives.field import PrimeField
from fri_pcs.protocol.config import FriParameters

# --- Type Aliases ---
Digest = bytes
MerklePath = tuple[Digest, ...]

# --- Binary Format ---
PROOF_MAGIC = b"FRIP"
PROOF_VERSION = 1
# magic, version, digest size, element width, domain bits, rounds, queries
_HEADER = struct.Struct(">4sBHHBBI")


# --- Proof Data Structures ---

@dataclass(frozen=True)
class LayerOpening:
    """Both points of a fold pair in one committed layer.

    Attributes:
        value: Layer value at the queried position
        path: Merkle path of the queried position
        sibling_value: Layer value at the partner position (half a layer away)
        sibling_path: Merkle path of the partner position
    """
    value: int
    path: MerklePath
    sibling_value: int
    sibling_path: MerklePath


@dataclass(frozen=True)
class QueryOpening:
    """Openings for one query index, one entry per committed layer."""
    layers: tuple[LayerOpening, ...]


@dataclass(frozen=True)
class FriProof:
    """FRI proof: layer roots, final constant, and per-query openings.

    Attributes:
        roots: Merkle root of every committed layer, in round order
        final_value: Constant value of the last, uncommitted layer
        openings: One QueryOpening per query index, in derivation order
    """
    roots: tuple[Digest, ...]
    final_value: int
    openings: tuple[QueryOpening, ...]


# --- Validation ---

def validate_proof_structure(
    proof: FriProof,
    params: FriParameters,
    field: PrimeField,
    digest_size: int,
) -> list[str]:
    """Validate that proof shape matches the instance parameters."""
    errors = []

    def check_value(v: Any, where: str) -> None:
        if not field.is_canonical(v):
            errors.append(f"{where}: {v!r} is not a canonical field element")

    def check_digest(d: Any, where: str) -> None:
        if not isinstance(d, bytes) or len(d) != digest_size:
            errors.append(f"{where}: expected {digest_size}-byte digest")

    def check_path(path: Any, expected_len: int, where: str) -> None:
        if not isinstance(path, tuple) or len(path) != expected_len:
            errors.append(f"{where}: expected path of length {expected_len}")
            return
        for k, d in enumerate(path):
            check_digest(d, f"{where}[{k}]")

    if not isinstance(proof, FriProof):
        return [f"expected a FriProof, got {type(proof).__name__}"]
    if not isinstance(proof.roots, tuple) or not isinstance(proof.openings, tuple):
        return ["roots and openings must be tuples"]

    n_rounds = params.num_rounds
    if len(proof.roots) != n_rounds:
        errors.append(f"Expected {n_rounds} layer roots, got {len(proof.roots)}")
    for i, root in enumerate(proof.roots):
        check_digest(root, f"root {i}")

    check_value(proof.final_value, "final value")

    if len(proof.openings) != params.query_count:
        errors.append(f"Expected {params.query_count} query openings, got {len(proof.openings)}")

    for q, opening in enumerate(proof.openings):
        if not isinstance(opening, QueryOpening) or not isinstance(opening.layers, tuple):
            errors.append(f"Query {q}: expected a QueryOpening with a tuple of layers")
            continue
        if len(opening.layers) != n_rounds:
            errors.append(f"Query {q}: expected {n_rounds} layer openings, got {len(opening.layers)}")
            continue
        for i, layer in enumerate(opening.layers):
            if not isinstance(layer, LayerOpening):
                errors.append(f"query {q} layer {i}: expected a LayerOpening")
                continue
            depth = params.layer_size(i).bit_length() - 1
            check_value(layer.value, f"query {q} layer {i} value")
            check_value(layer.sibling_value, f"query {q} layer {i} sibling value")
            check_path(layer.path, depth, f"query {q} layer {i} path")
            check_path(layer.sibling_path, depth, f"query {q} layer {i} sibling path")

    return errors


def check_proof_structure(
    proof: FriProof,
    params: FriParameters,
    field: PrimeField,
    digest_size: int,
) -> None:
    """Raise MalformedProof listing every structural problem found."""
    errors = validate_proof_structure(proof, params, field, digest_size)
    if errors:
        raise MalformedProof("; ".join(errors))


# --- JSON Serialization ---

def proof_to_json(proof: FriProof) -> dict[str, Any]:
    """Convert proof to JSON-serializable dictionary."""
    return {
        "version": PROOF_VERSION,
        "roots": [r.hex() for r in proof.roots],
        "final_value": str(proof.final_value),
        "openings": [
            [
                {
                    "value": str(layer.value),
                    "path": [d.hex() for d in layer.path],
                    "sibling_value": str(layer.sibling_value),
                    "sibling_path": [d.hex() for d in layer.sibling_path],
                }
                for layer in opening.layers
            ]
            for opening in proof.openings
        ],
    }


def proof_from_json(j: dict[str, Any]) -> FriProof:
    """Rebuild a proof from proof_to_json output."""
    try:
        if j["version"] != PROOF_VERSION:
            raise MalformedProof(f"unsupported proof version {j['version']!r}")
        return FriProof(
            roots=tuple(bytes.fromhex(r) for r in j["roots"]),
            final_value=int(j["final_value"]),
            openings=tuple(
                QueryOpening(layers=tuple(
                    LayerOpening(
                        value=int(layer["value"]),
                        path=tuple(bytes.fromhex(d) for d in layer["path"]),
                        sibling_value=int(layer["sibling_value"]),
                        sibling_path=tuple(bytes.fromhex(d) for d in layer["sibling_path"]),
                    )
                    for layer in opening
                ))
                for opening in j["openings"]
            ),
        )
    except (KeyError, TypeError, ValueError) as e:
        if isinstance(e, MalformedProof):
            raise
        raise MalformedProof(f"invalid proof JSON: {e}") from e


# --- Binary Serialization ---

def to_bytes(proof: FriProof, field: PrimeField) -> bytes:
    """Serialize proof to the fixed-width binary layout.

    Layout: header, roots, final value, then for every query and every layer:
    value, sibling value, path, sibling path. Field elements are big-endian
    with the field's byte width.
    """
    if not proof.roots or not proof.openings:
        raise MalformedProof("cannot serialize a proof without roots or openings")

    first = proof.openings[0]
    if not isinstance(first, QueryOpening) or not first.layers or not isinstance(first.layers[0], LayerOpening):
        raise MalformedProof("first query opening has no layer openings")
    digest_size = len(proof.roots[0])
    domain_bits = len(first.layers[0].path)
    n_rounds = len(proof.roots)

    # The shape fixes the degree bound at 2^rounds
    try:
        params = FriParameters(
            1 << domain_bits, 1 << n_rounds, len(proof.openings), (1 << domain_bits) >> n_rounds
        )
    except ValueError as e:
        raise MalformedProof(f"inconsistent proof shape: {e}") from e
    check_proof_structure(proof, params, field, digest_size)

    out = [_HEADER.pack(
        PROOF_MAGIC, PROOF_VERSION, digest_size, field.byte_width,
        domain_bits, n_rounds, len(proof.openings),
    )]
    out.extend(proof.roots)
    out.append(field.encode(proof.final_value))
    for opening in proof.openings:
        for layer in opening.layers:
            out.append(field.encode(layer.value))
            out.append(field.encode(layer.sibling_value))
            out.extend(layer.path)
            out.extend(layer.sibling_path)
    return b"".join(out)


def from_bytes(data: bytes, field: PrimeField) -> FriProof:
    """Parse the layout written by to_bytes."""
    if len(data) < _HEADER.size:
        raise MalformedProof(f"proof truncated: {len(data)} bytes, header needs {_HEADER.size}")

    magic, version, digest_size, width, domain_bits, n_rounds, n_queries = _HEADER.unpack_from(data)
    if magic != PROOF_MAGIC:
        raise MalformedProof(f"bad magic {magic!r}")
    if version != PROOF_VERSION:
        raise MalformedProof(f"unsupported proof version {version}")
    if width != field.byte_width:
        raise MalformedProof(f"element width {width} does not match field width {field.byte_width}")
    if n_rounds > domain_bits:
        raise MalformedProof(f"{n_rounds} rounds exceed {domain_bits} domain bits")

    reader = _Reader(data, _HEADER.size)
    try:
        roots = tuple(reader.take(digest_size) for _ in range(n_rounds))
        final_value = int(field.decode(reader.take(width)))
        openings = []
        for _ in range(n_queries):
            layers = []
            for i in range(n_rounds):
                depth = domain_bits - i
                value = int(field.decode(reader.take(width)))
                sibling_value = int(field.decode(reader.take(width)))
                path = tuple(reader.take(digest_size) for _ in range(depth))
                sibling_path = tuple(reader.take(digest_size) for _ in range(depth))
                layers.append(LayerOpening(value, path, sibling_value, sibling_path))
            openings.append(QueryOpening(tuple(layers)))
    except ValueError as e:
        if isinstance(e, MalformedProof):
            raise
        raise MalformedProof(f"invalid field element: {e}") from e

    if reader.offset != len(data):
        raise MalformedProof(f"{len(data) - reader.offset} trailing bytes after proof")

    return FriProof(roots=roots, final_value=final_value, openings=tuple(openings))


class _Reader:
    """Sequential reader over a bytes buffer."""

    def __init__(self, data: bytes, offset: int = 0) -> None:
        self.data = data
        self.offset = offset

    def take(self, n: int) -> bytes:
        end = self.offset + n
        if end > len(self.data):
            raise MalformedProof(f"proof truncated at byte {self.offset}, needed {n} more")
        chunk = self.data[self.offset:end]
        self.offset = end
        return chunk
