"""
Multiproof Unit Tests
Tests for merkletree/tree/multiproof.py

Tests:
1. Every non-empty subset of small trees proves and verifies
2. Compression - never more hashes than the single proofs combined
3. Tamper detection and strict mode
4. Structural validation of MultiProof
5. Serialization via to_dict()/from_dict()
"""
from itertools import combinations

import pytest

from merkletree.crypto.hashing import Keccak256
from merkletree.schemas.errors import (
    DataNotFoundException,
    EmptyInputException,
    MalformedProofException,
    TreeEncodingException,
    UnknownHashTypeException,
)
from merkletree.tree.merkle_proofs import generate_proof
from merkletree.tree.multiproof import (
    MultiProof,
    generate_multiproof,
    generate_multiproof_for_indices,
    verify_multiproof,
)

from fixtures.trees import TREE_MODES, make_tree, make_values


BAD_HASH = bytes([0x0B, 0xAD] * 16)


def _subsets(values):
    for size in range(1, len(values) + 1):
        yield from combinations(values, size)


class TestSubsets:
    """Multiproofs for every subset of small trees."""

    @pytest.mark.slow
    @pytest.mark.parametrize("salted,sorted_mode", TREE_MODES)
    @pytest.mark.parametrize("count", [1, 2, 3, 5])
    def test_every_subset_verifies(self, count, salted, sorted_mode):
        """Every non-empty subset proves against the root."""
        tree = make_tree(make_values(count), salted=salted, sorted=sorted_mode)

        for subset in _subsets(tree.data):
            proof = generate_multiproof(tree, list(subset))
            assert proof.verify(list(subset), tree.root)

    def test_hash_count_bounded_by_single_proofs(self):
        """A multiproof never carries more hashes than the single proofs."""
        tree = make_tree(make_values(8))

        for subset in _subsets(tree.data):
            proof = generate_multiproof(tree, list(subset))
            single_total = sum(len(generate_proof(tree, v).hashes) for v in subset)
            assert proof.hash_count <= single_total
            if len(subset) > 1:
                assert proof.hash_count < single_total

    def test_siblings_need_no_hashes_between_them(self):
        """Proving two siblings only needs the hashes above their parent."""
        tree = make_tree(make_values(4))
        proof = generate_multiproof_for_indices(tree, [0, 1])

        assert proof.hashes == {3: tree.nodes[3]}

    def test_all_values_need_no_hashes(self):
        """Proving every leaf of a full tree needs no hashes at all."""
        tree = make_tree(make_values(8))
        proof = generate_multiproof(tree, tree.data)

        assert proof.hash_count == 0
        assert proof.verify(tree.data, tree.root)

    def test_padding_leaf_supplied_as_hash(self, foo_bar_baz_tree):
        """The zero padding leaf is supplied like any other sibling."""
        proof = generate_multiproof(foo_bar_baz_tree, [b"Baz"])

        assert proof.hashes == {7: bytes(32), 2: foo_bar_baz_tree.nodes[2]}

    def test_verify_is_repeatable(self, foo_bar_baz_tree):
        """Verification does not consume the proof."""
        proof = generate_multiproof(foo_bar_baz_tree, [b"Foo", b"Baz"])
        before = dict(proof.hashes)

        assert proof.verify([b"Foo", b"Baz"], foo_bar_baz_tree.root)
        assert proof.verify([b"Foo", b"Baz"], foo_bar_baz_tree.root)
        assert proof.hashes == before


class TestOrdering:
    """Indices keep the order values were requested in."""

    def test_request_order_kept(self, foo_bar_baz_tree):
        """Indices pair positionally with the requested values."""
        proof = generate_multiproof(foo_bar_baz_tree, [b"Baz", b"Foo"])

        assert proof.indices == [2, 0]
        assert proof.verify([b"Baz", b"Foo"], foo_bar_baz_tree.root)
        assert proof.verify([b"Foo", b"Baz"], foo_bar_baz_tree.root) is False

    def test_duplicate_request(self, foo_bar_baz_tree):
        """Requesting the same value twice still verifies."""
        proof = generate_multiproof(foo_bar_baz_tree, [b"Bar", b"Bar"])

        assert proof.indices == [1, 1]
        assert proof.verify([b"Bar", b"Bar"], foo_bar_baz_tree.root)

    def test_duplicate_values_by_index(self):
        """Later occurrences of duplicate values are provable by index."""
        tree = make_tree([b"a", b"b", b"a", b"c"], salted=True)
        proof = generate_multiproof_for_indices(tree, [2, 3])

        assert proof.verify([b"a", b"c"], tree.root)


class TestTamperDetection:
    """Tampered proofs fail or raise."""

    def test_tampered_hash(self):
        """Replacing any supplied hash fails verification."""
        tree = make_tree(make_values(8))
        values = [tree.data[1], tree.data[6]]
        proof = generate_multiproof(tree, values)

        for position in proof.hashes:
            hashes = dict(proof.hashes)
            hashes[position] = BAD_HASH
            bad = MultiProof(values=proof.values, hashes=hashes, indices=proof.indices)
            assert bad.verify(values, tree.root) is False

    def test_tampered_value(self):
        """A value not in the tree fails verification."""
        tree = make_tree(make_values(8))
        proof = generate_multiproof(tree, [tree.data[0], tree.data[3]])

        assert proof.verify([tree.data[0], b"intruder"], tree.root) is False

    def test_wrong_root(self, foo_bar_baz_tree):
        """A different root fails verification."""
        proof = generate_multiproof(foo_bar_baz_tree, [b"Foo"])

        assert proof.verify([b"Foo"], BAD_HASH) is False

    def test_missing_hash_non_strict(self):
        """A proof missing a hash returns False by default."""
        tree = make_tree(make_values(8))
        proof = generate_multiproof_for_indices(tree, [0])
        hashes = dict(proof.hashes)
        hashes.pop(3)
        incomplete = MultiProof(values=proof.values, hashes=hashes, indices=[0])

        assert incomplete.verify([tree.data[0]], tree.root) is False

    def test_missing_hash_strict(self):
        """A proof missing a hash raises in strict mode."""
        tree = make_tree(make_values(8))
        proof = generate_multiproof_for_indices(tree, [0])
        hashes = dict(proof.hashes)
        hashes.pop(3)
        incomplete = MultiProof(values=proof.values, hashes=hashes, indices=[0])

        with pytest.raises(MalformedProofException, match="enough hashes"):
            incomplete.verify([tree.data[0]], tree.root, strict=True)

    def test_strict_mismatch_returns_false(self):
        """Strict mode still returns False for a complete but wrong proof."""
        tree = make_tree(make_values(8))
        proof = generate_multiproof_for_indices(tree, [0])

        assert proof.verify([b"intruder"], tree.root, strict=True) is False

    def test_value_count_mismatch(self, foo_bar_baz_tree):
        """Supplying a different number of values raises."""
        proof = generate_multiproof(foo_bar_baz_tree, [b"Foo", b"Bar"])

        with pytest.raises(MalformedProofException, match="Expected 2 values"):
            proof.verify([b"Foo"], foo_bar_baz_tree.root)


class TestSettings:
    """Salting, sorting and provider settings."""

    def test_proof_carries_tree_settings(self):
        """A generated multiproof records the tree's settings."""
        tree = make_tree(make_values(5), Keccak256(), salted=True, sorted=True)
        proof = generate_multiproof(tree, tree.data[:2])

        assert proof.salted is True
        assert proof.sorted is True
        assert proof.hash_provider.name == "keccak256"
        assert proof.values == 8

    def test_verify_multiproof_uses_caller_settings(self):
        """verify_multiproof replays the proof with the given settings."""
        tree = make_tree(make_values(5), salted=True)
        values = [tree.data[0], tree.data[4]]
        proof = generate_multiproof(tree, values)

        assert verify_multiproof(values, True, proof, tree.root)
        assert verify_multiproof(values, False, proof, tree.root) is False
        assert verify_multiproof(values, True, proof, tree.root, Keccak256()) is False


class TestGenerationErrors:
    """Errors raised while generating multiproofs."""

    def test_missing_value(self, foo_bar_baz_tree):
        """Values not in the tree raise DataNotFoundException."""
        with pytest.raises(DataNotFoundException):
            generate_multiproof(foo_bar_baz_tree, [b"Foo", b"Qux"])

    def test_no_values(self, foo_bar_baz_tree):
        """An empty request raises EmptyInputException."""
        with pytest.raises(EmptyInputException):
            generate_multiproof(foo_bar_baz_tree, [])
        with pytest.raises(EmptyInputException):
            generate_multiproof_for_indices(foo_bar_baz_tree, [])

    def test_index_out_of_range(self, foo_bar_baz_tree):
        """Indices must address a value."""
        with pytest.raises(DataNotFoundException):
            generate_multiproof_for_indices(foo_bar_baz_tree, [0, 3])


class TestStructure:
    """Structural validation in MultiProof.__post_init__."""

    def test_leaf_count_power_of_two(self):
        """values must be a power of two."""
        with pytest.raises(MalformedProofException, match="power of two"):
            MultiProof(values=3, hashes={}, indices=[0])

    def test_no_indices(self):
        """At least one index is required."""
        with pytest.raises(MalformedProofException, match="no indices specified"):
            MultiProof(values=4, hashes={}, indices=[])

    def test_index_out_of_range(self):
        """Indices must be below values."""
        with pytest.raises(MalformedProofException, match="out of range"):
            MultiProof(values=4, hashes={}, indices=[4])

    def test_hash_position_out_of_range(self):
        """Hash positions must lie in [1, 2N)."""
        with pytest.raises(MalformedProofException):
            MultiProof(values=4, hashes={0: BAD_HASH}, indices=[0])
        with pytest.raises(MalformedProofException):
            MultiProof(values=4, hashes={8: BAD_HASH}, indices=[0])


class TestSerialization:
    """Tests for MultiProof.to_dict() and MultiProof.from_dict()."""

    def test_round_trip(self):
        """A serialized multiproof still verifies."""
        tree = make_tree(make_values(6), Keccak256(), salted=True)
        values = [tree.data[5], tree.data[2]]
        proof = generate_multiproof(tree, values)
        payload = proof.to_dict()

        assert payload["hash_type"] == "keccak256"
        assert payload["indices"] == [5, 2]
        assert payload["salt"] is True
        restored = MultiProof.from_dict(payload)
        assert restored.hashes == proof.hashes
        assert restored.verify(values, tree.root)

    def test_unknown_hash_type(self, foo_bar_baz_tree):
        """Unregistered provider names are rejected."""
        payload = generate_multiproof(foo_bar_baz_tree, [b"Foo"]).to_dict()
        payload["hash_type"] = "poseidon"

        with pytest.raises(UnknownHashTypeException):
            MultiProof.from_dict(payload)

    def test_missing_field(self, foo_bar_baz_tree):
        """Structurally invalid payloads raise TreeEncodingException."""
        payload = generate_multiproof(foo_bar_baz_tree, [b"Foo"]).to_dict()
        del payload["indices"]

        with pytest.raises(TreeEncodingException):
            MultiProof.from_dict(payload)

    def test_structurally_invalid_payload(self, foo_bar_baz_tree):
        """Payloads failing MultiProof validation raise MalformedProofException."""
        payload = generate_multiproof(foo_bar_baz_tree, [b"Foo"]).to_dict()
        payload["values"] = 3

        with pytest.raises(MalformedProofException):
            MultiProof.from_dict(payload)

    @pytest.mark.parametrize("key", ["salt", "sorted"])
    @pytest.mark.parametrize("flag", ["false", "true", 0, 1, None])
    def test_non_boolean_flag(self, foo_bar_baz_tree, key, flag):
        """Options must be JSON booleans, not strings or numbers."""
        payload = generate_multiproof(foo_bar_baz_tree, [b"Foo"]).to_dict()
        payload[key] = flag

        with pytest.raises(TreeEncodingException, match="must be a boolean") as exc_info:
            MultiProof.from_dict(payload)

        assert exc_info.value.details == {"field": key}

    def test_missing_flags_default_to_false(self, foo_bar_baz_tree):
        """Absent options fall back to unsalted, unsorted."""
        payload = generate_multiproof(foo_bar_baz_tree, [b"Foo"]).to_dict()
        del payload["salt"]
        del payload["sorted"]

        proof = MultiProof.from_dict(payload)

        assert proof.salted is False
        assert proof.sorted is False
