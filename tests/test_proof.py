"""Tests for proof validation and serialization."""

import dataclasses
import json
import struct

import pytest

from fri_pcs.errors import MalformedProof
from fri_pcs.primitives.field import BABYBEAR_PRIME, PrimeField
from fri_pcs.primitives.ntt import EvaluationDomain
from fri_pcs.primitives.polynomial import Polynomial
from fri_pcs.protocol.config import FriConfig, FriParameters
from fri_pcs.protocol.proof import (
    PROOF_MAGIC,
    FriProof,
    from_bytes,
    proof_from_json,
    proof_to_json,
    to_bytes,
    validate_proof_structure,
)
from fri_pcs.protocol.prover import prove
from fri_pcs.protocol.verifier import verify

CFG = FriConfig(field_modulus=BABYBEAR_PRIME, max_workers=1)
N, DEGREE_BOUND, QUERIES = 32, 4, 5


@pytest.fixture(scope="module")
def proof() -> FriProof:
    field = CFG.field
    domain = EvaluationDomain.of_size(field, N)
    evals = Polynomial.from_coeffs(field, [9, 8, 7, 6]).evaluate_over(domain)
    return prove(evals, domain, DEGREE_BOUND, QUERIES, config=CFG)


def _params() -> FriParameters:
    return FriParameters(N, DEGREE_BOUND, QUERIES)


class TestValidation:
    """validate_proof_structure reports every shape problem."""

    def test_honest_proof_is_well_formed(self, proof: FriProof, babybear: PrimeField) -> None:
        assert validate_proof_structure(proof, _params(), babybear, 32) == []

    def test_missing_root(self, proof: FriProof, babybear: PrimeField) -> None:
        bad = dataclasses.replace(proof, roots=proof.roots[:-1])
        errors = validate_proof_structure(bad, _params(), babybear, 32)
        assert any("layer roots" in e for e in errors)

    def test_missing_layer(self, proof: FriProof, babybear: PrimeField) -> None:
        opening = dataclasses.replace(proof.openings[0], layers=proof.openings[0].layers[:-1])
        bad = dataclasses.replace(proof, openings=(opening,) + proof.openings[1:])
        errors = validate_proof_structure(bad, _params(), babybear, 32)
        assert errors == ["Query 0: expected 2 layer openings, got 1"]

    def test_non_canonical_value(self, proof: FriProof, babybear: PrimeField) -> None:
        bad = dataclasses.replace(proof, final_value=BABYBEAR_PRIME)
        errors = validate_proof_structure(bad, _params(), babybear, 32)
        assert any("final value" in e for e in errors)

    def test_short_path(self, proof: FriProof, babybear: PrimeField) -> None:
        layer = proof.openings[2].layers[1]
        short = dataclasses.replace(layer, sibling_path=layer.sibling_path[1:])
        opening = dataclasses.replace(proof.openings[2], layers=(proof.openings[2].layers[0], short) + proof.openings[2].layers[2:])
        bad = dataclasses.replace(proof, openings=proof.openings[:2] + (opening,) + proof.openings[3:])
        errors = validate_proof_structure(bad, _params(), babybear, 32)
        assert errors == ["query 2 layer 1 sibling path: expected path of length 4"]

    def test_wrong_digest_size(self, proof: FriProof, babybear: PrimeField) -> None:
        errors = validate_proof_structure(proof, _params(), babybear, 64)
        assert errors

    def test_verify_raises_on_malformed(self, proof: FriProof) -> None:
        bad = dataclasses.replace(proof, openings=proof.openings[1:])
        with pytest.raises(MalformedProof):
            verify(bad, N, DEGREE_BOUND, QUERIES, config=CFG)

    def test_ill_typed_opening(self, proof: FriProof, babybear: PrimeField) -> None:
        bad = dataclasses.replace(proof, openings=(tuple(proof.openings[0].layers),) + proof.openings[1:])
        errors = validate_proof_structure(bad, _params(), babybear, 32)
        assert errors == ["Query 0: expected a QueryOpening with a tuple of layers"]
        with pytest.raises(MalformedProof):
            verify(bad, N, DEGREE_BOUND, QUERIES, config=CFG)

    def test_ill_typed_layer(self, proof: FriProof, babybear: PrimeField) -> None:
        layers = proof.openings[1].layers
        opening = dataclasses.replace(proof.openings[1], layers=(("value", "path"),) + layers[1:])
        bad = dataclasses.replace(proof, openings=proof.openings[:1] + (opening,) + proof.openings[2:])
        errors = validate_proof_structure(bad, _params(), babybear, 32)
        assert errors == ["query 1 layer 0: expected a LayerOpening"]
        with pytest.raises(MalformedProof):
            verify(bad, N, DEGREE_BOUND, QUERIES, config=CFG)

    @pytest.mark.parametrize("bad", [None, {"roots": ()}])
    def test_not_a_proof(self, bad, babybear: PrimeField) -> None:
        with pytest.raises(MalformedProof):
            verify(bad, N, DEGREE_BOUND, QUERIES, config=CFG)


class TestJson:
    """JSON form: hex digests, decimal field elements."""

    def test_roundtrip_through_json_text(self, proof: FriProof) -> None:
        text = json.dumps(proof_to_json(proof))
        restored = proof_from_json(json.loads(text))
        assert restored == proof
        assert verify(restored, N, DEGREE_BOUND, QUERIES, config=CFG)

    def test_layout(self, proof: FriProof) -> None:
        j = proof_to_json(proof)
        assert j["version"] == 1
        assert j["roots"][0] == proof.roots[0].hex()
        assert j["final_value"] == str(proof.final_value)
        assert len(j["openings"]) == QUERIES
        assert set(j["openings"][0][0]) == {"value", "path", "sibling_value", "sibling_path"}

    @pytest.mark.parametrize("mutate", [
        lambda j: j.pop("roots"),
        lambda j: j.update(version=2),
        lambda j: j.update(final_value="not a number"),
        lambda j: j["roots"].__setitem__(0, "zz"),
        lambda j: j.update(openings=[[{"value": "1"}]]),
    ])
    def test_malformed_json(self, proof: FriProof, mutate) -> None:
        j = proof_to_json(proof)
        mutate(j)
        with pytest.raises(MalformedProof):
            proof_from_json(j)


class TestBinary:
    """Fixed-width binary form."""

    def test_roundtrip(self, proof: FriProof, babybear: PrimeField) -> None:
        data = to_bytes(proof, babybear)
        assert from_bytes(data, babybear) == proof

    def test_size(self, proof: FriProof, babybear: PrimeField) -> None:
        data = to_bytes(proof, babybear)
        # header + 2 roots + final value + per query: 2 layers of 2 values and 2 paths
        paths = 2 * (5 + 4)
        expected = 15 + 2 * 32 + 4 + QUERIES * (2 * 2 * 4 + paths * 32)
        assert len(data) == expected

    def test_header(self, proof: FriProof, babybear: PrimeField) -> None:
        data = to_bytes(proof, babybear)
        magic, version, digest, width, bits, rounds, queries = struct.unpack_from(">4sBHHBBI", data)
        assert (magic, version, digest, width, bits, rounds, queries) == (PROOF_MAGIC, 1, 32, 4, 5, 2, QUERIES)

    def test_truncated(self, proof: FriProof, babybear: PrimeField) -> None:
        data = to_bytes(proof, babybear)
        for cut in (0, 10, len(data) // 2, len(data) - 1):
            with pytest.raises(MalformedProof):
                from_bytes(data[:cut], babybear)

    def test_trailing_bytes(self, proof: FriProof, babybear: PrimeField) -> None:
        with pytest.raises(MalformedProof):
            from_bytes(to_bytes(proof, babybear) + b"\x00", babybear)

    def test_bad_magic(self, proof: FriProof, babybear: PrimeField) -> None:
        data = to_bytes(proof, babybear)
        with pytest.raises(MalformedProof):
            from_bytes(b"XXXX" + data[4:], babybear)

    def test_wrong_field_width(self, proof: FriProof, babybear: PrimeField, small_field: PrimeField) -> None:
        with pytest.raises(MalformedProof):
            from_bytes(to_bytes(proof, babybear), small_field)

    def test_non_canonical_element(self, proof: FriProof, babybear: PrimeField) -> None:
        data = bytearray(to_bytes(proof, babybear))
        final_offset = 15 + 2 * 32
        data[final_offset:final_offset + 4] = BABYBEAR_PRIME.to_bytes(4, "big")
        with pytest.raises(MalformedProof):
            from_bytes(bytes(data), babybear)

    def test_refuses_inconsistent_proof(self, proof: FriProof, babybear: PrimeField) -> None:
        bad = dataclasses.replace(proof, roots=proof.roots[:-1])
        with pytest.raises(MalformedProof):
            to_bytes(bad, babybear)
