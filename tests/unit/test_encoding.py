"""
Tree Encoding Unit Tests
Tests for merkletree/schemas/encoding.py

Tests:
- Export/import round trip preserves nodes, values and options
- Wire format shape
- Provider resolution and mismatches
- Invalid payloads
- Optional re-hash verification
"""
import base64
import json

import pytest

from merkletree.crypto.hashing import Blake2b, Keccak256, Sha3_512
from merkletree.schemas.encoding import (
    TreeExport,
    dumps_tree,
    export_tree,
    import_tree,
    loads_tree,
)
from merkletree.schemas.errors import TreeEncodingException, UnknownHashTypeException
from merkletree.tree.merkle_proofs import generate_proof, verify_proof

from fixtures.trees import TREE_MODES, make_tree, make_values


class TestRoundTrip:
    """Export then import reproduces the tree."""

    @pytest.mark.parametrize("salted,sorted_mode", TREE_MODES)
    def test_dict_round_trip(self, salted, sorted_mode):
        """All options survive a dict round trip."""
        tree = make_tree(make_values(5), salted=salted, sorted=sorted_mode)
        restored = import_tree(export_tree(tree))

        assert restored.nodes == tree.nodes
        assert restored.data == tree.data
        assert restored.salted == salted
        assert restored.sorted == sorted_mode
        assert restored.hash_provider.name == "blake2b"

    @pytest.mark.parametrize("provider", [Keccak256(), Sha3_512()])
    def test_json_round_trip(self, provider):
        """Trees built with other providers survive a JSON round trip."""
        tree = make_tree(make_values(3), hash_provider=provider)
        restored = loads_tree(dumps_tree(tree))

        assert restored.root == tree.root
        assert restored.hash_provider.name == provider.name

    def test_restored_tree_generates_valid_proofs(self, foo_bar_baz_tree):
        """Proofs from an imported tree verify against the original root."""
        restored = loads_tree(dumps_tree(foo_bar_baz_tree))
        proof = generate_proof(restored, b"Bar")

        assert verify_proof(b"Bar", False, proof, [foo_bar_baz_tree.root])

    def test_verify_flag_accepts_genuine_tree(self):
        """verify=True accepts a tree that rebuilds identically."""
        tree = make_tree(make_values(6), salted=True, sorted=True)

        assert import_tree(export_tree(tree), verify=True).root == tree.root


class TestWireFormat:
    """Shape of the exported document."""

    def test_fields(self, foo_bar_baz_tree):
        """Exported dicts carry options, base64 values and nodes."""
        payload = export_tree(foo_bar_baz_tree)

        assert set(payload) == {"salt", "sorted", "hash_type", "data", "nodes"}
        assert payload["hash_type"] == "blake2b"
        assert payload["data"] == ["Rm9v", "QmFy", "QmF6"]
        assert payload["nodes"][0] is None
        assert len(payload["nodes"]) == 8
        assert base64.b64decode(payload["nodes"][1]) == foo_bar_baz_tree.root

    def test_json_is_parseable(self, foo_bar_baz_tree):
        """dumps_tree produces JSON matching export_tree."""
        assert json.loads(dumps_tree(foo_bar_baz_tree, indent=2)) == export_tree(foo_bar_baz_tree)

    def test_model_accepts_export(self, foo_bar_baz_tree):
        """Exports validate against TreeExport and import directly from it."""
        model = TreeExport.model_validate(export_tree(foo_bar_baz_tree))

        assert import_tree(model).root == foo_bar_baz_tree.root


class TestProviderResolution:
    """Hash provider handling on import."""

    def test_supplied_provider_used(self, foo_bar_baz_tree):
        """A supplied provider with the recorded name is used."""
        provider = Blake2b()
        restored = import_tree(export_tree(foo_bar_baz_tree), hash_provider=provider)

        assert restored.hash_provider is provider

    def test_supplied_provider_mismatch(self, foo_bar_baz_tree):
        """A supplied provider with another name is rejected."""
        with pytest.raises(TreeEncodingException, match="cannot import with 'keccak256'"):
            import_tree(export_tree(foo_bar_baz_tree), hash_provider=Keccak256())

    def test_unknown_hash_type(self, foo_bar_baz_tree):
        """Unregistered provider names are rejected."""
        payload = export_tree(foo_bar_baz_tree)
        payload["hash_type"] = "poseidon"

        with pytest.raises(UnknownHashTypeException):
            import_tree(payload)


class TestInvalidPayloads:
    """Structurally invalid exports raise TreeEncodingException."""

    def test_no_values(self, foo_bar_baz_tree):
        """At least one value is required."""
        payload = export_tree(foo_bar_baz_tree)
        payload["data"] = []

        with pytest.raises(TreeEncodingException, match="Invalid tree export"):
            import_tree(payload)

    def test_wrong_node_count(self, foo_bar_baz_tree):
        """Node count must be twice the padded leaf count."""
        payload = export_tree(foo_bar_baz_tree)
        payload["nodes"] = payload["nodes"][:-1]

        with pytest.raises(TreeEncodingException) as exc_info:
            import_tree(payload)

        assert "errors" in exc_info.value.details

    def test_null_branch(self, foo_bar_baz_tree):
        """Only nodes[0] may be null."""
        payload = export_tree(foo_bar_baz_tree)
        payload["nodes"][3] = None

        with pytest.raises(TreeEncodingException):
            import_tree(payload)

    def test_bad_base64(self, foo_bar_baz_tree):
        """Values must be valid base64."""
        payload = export_tree(foo_bar_baz_tree)
        payload["data"][0] = "!!not base64!!"

        with pytest.raises(TreeEncodingException):
            import_tree(payload)

    def test_unknown_field(self, foo_bar_baz_tree):
        """Extra fields are rejected."""
        payload = export_tree(foo_bar_baz_tree)
        payload["root"] = payload["nodes"][1]

        with pytest.raises(TreeEncodingException):
            import_tree(payload)

    def test_wrong_digest_length(self, foo_bar_baz_tree):
        """Nodes must have the provider's digest length."""
        payload = export_tree(foo_bar_baz_tree)
        payload["nodes"][2] = base64.b64encode(b"short").decode("ascii")

        with pytest.raises(TreeEncodingException, match="Node 2 has length 5"):
            import_tree(payload)

    def test_invalid_json(self):
        """Text that is not JSON is rejected."""
        with pytest.raises(TreeEncodingException):
            loads_tree("{not json")

    def test_verify_detects_tampered_node(self, foo_bar_baz_tree):
        """verify=True rejects nodes that do not match the values."""
        payload = export_tree(foo_bar_baz_tree)
        payload["nodes"][5] = base64.b64encode(bytes(32)).decode("ascii")

        assert import_tree(payload).nodes[5] == bytes(32)
        with pytest.raises(TreeEncodingException, match="do not match"):
            import_tree(payload, verify=True)
