"""Tests for the Term Normalizer."""

import pytest

from cxpolicy.core.normalizer import TermNormalizer


class TestTermNormalizer:
    """Test JSON-LD term normalization."""

    @pytest.fixture
    def normalizer(self) -> TermNormalizer:
        return TermNormalizer()

    def test_plain_document_passes_through(self, normalizer: TermNormalizer) -> None:
        """Documents using local terms should pass through unchanged."""
        doc = {
            "@type": "PolicyDefinition",
            "policy": {"permission": [{"action": "use"}]},
        }

        result = normalizer.normalize(doc)

        assert result.success
        assert result.data == doc
        assert result.rewrites is None

    def test_strips_key_prefixes(self, normalizer: TermNormalizer) -> None:
        """Prefixed keys should be reduced to local names."""
        doc = {
            "edc:policy": {
                "odrl:permission": [{"odrl:action": "use"}],
            },
        }

        result = normalizer.normalize(doc)

        assert result.success
        assert result.data == {"policy": {"permission": [{"action": "use"}]}}
        assert "stripped_key_prefix" in (result.rewrites or [])

    def test_strips_namespace_iris(self, normalizer: TermNormalizer) -> None:
        """Full namespace IRIs in keys and terms should be reduced."""
        doc = {
            "https://w3id.org/edc/v0.0.1/ns/policy": {
                "http://www.w3.org/ns/odrl/2/permission": {
                    "http://www.w3.org/ns/odrl/2/action": "http://www.w3.org/ns/odrl/2/use",
                },
            },
        }

        result = normalizer.normalize(doc)

        assert result.success
        assert result.data == {"policy": {"permission": {"action": "use"}}}

    def test_unwraps_id_and_value_nodes(self, normalizer: TermNormalizer) -> None:
        """@id / @value nodes should be unwrapped for term and literal fields."""
        doc = {
            "policy": {
                "permission": [
                    {
                        "action": {"@id": "odrl:use"},
                        "constraint": [
                            {
                                "leftOperand": {"@id": "cx-policy:Membership"},
                                "operator": {"@id": "odrl:eq"},
                                "rightOperand": {"@value": "active"},
                            }
                        ],
                    }
                ]
            }
        }

        result = normalizer.normalize(doc)

        assert result.success
        constraint = result.data["policy"]["permission"][0]["constraint"][0]
        assert result.data["policy"]["permission"][0]["action"] == "use"
        assert constraint == {
            "leftOperand": "Membership",
            "operator": "eq",
            "rightOperand": "active",
        }
        assert "unwrapped_value_node" in (result.rewrites or [])

    def test_unwraps_expanded_single_lists(self, normalizer: TermNormalizer) -> None:
        """Expanded JSON-LD wraps scalars in single-element lists."""
        doc = {
            "policy": {
                "permission": [
                    {"action": [{"@id": "http://www.w3.org/ns/odrl/2/use"}]},
                ]
            }
        }

        result = normalizer.normalize(doc)

        assert result.success
        assert result.data["policy"]["permission"][0]["action"] == "use"

    def test_keeps_right_operand_lists(self, normalizer: TermNormalizer) -> None:
        """Multi-valued right operands should stay lists."""
        doc = {
            "rightOperand": [{"@value": "BPNL000000000001"}, {"@value": "BPNL000000000002"}],
        }

        result = normalizer.normalize(doc)

        assert result.success
        assert result.data["rightOperand"] == ["BPNL000000000001", "BPNL000000000002"]

    def test_right_operand_values_keep_colons(self, normalizer: TermNormalizer) -> None:
        """Literal values are not terms; their prefixes must not be stripped."""
        doc = {"rightOperand": "cx.core.industrycore:1"}

        result = normalizer.normalize(doc)

        assert result.data["rightOperand"] == "cx.core.industrycore:1"

    def test_drops_context(self, normalizer: TermNormalizer) -> None:
        """@context is consumed by the normalizer and not passed on."""
        doc = {
            "@context": {"@vocab": "https://w3id.org/edc/v0.0.1/ns/"},
            "@id": "policy-1",
            "policy": {},
        }

        result = normalizer.normalize(doc)

        assert result.success
        assert result.data == {"@id": "policy-1", "policy": {}}

    def test_does_not_modify_input(self, normalizer: TermNormalizer) -> None:
        """The caller's document must not be mutated."""
        doc = {"edc:policy": {"odrl:permission": [{"odrl:action": "odrl:use"}]}}
        snapshot = {"edc:policy": {"odrl:permission": [{"odrl:action": "odrl:use"}]}}

        normalizer.normalize(doc)

        assert doc == snapshot

    def test_fails_on_non_object(self, normalizer: TermNormalizer) -> None:
        """Only JSON objects can be normalized."""
        result = normalizer.normalize(["not", "an", "object"])

        assert not result.success
        assert result.error is not None
        assert "list" in result.error

    def test_unknown_prefix_left_alone(self, normalizer: TermNormalizer) -> None:
        """Unknown prefixes are not guessed at."""
        result = normalizer.normalize({"foo:bar": 1})

        assert result.data == {"foo:bar": 1}

    def test_unwraps_list_nodes(self, normalizer: TermNormalizer) -> None:
        """Ordered @list containers become plain lists."""
        doc = {
            "http://www.w3.org/ns/odrl/2/and": [
                {
                    "@list": [
                        {"http://www.w3.org/ns/odrl/2/leftOperand": [{"@id": "cx-policy:Membership"}]},
                        {"http://www.w3.org/ns/odrl/2/leftOperand": [{"@id": "cx-policy:FrameworkAgreement"}]},
                    ]
                }
            ],
            "rightOperand": [{"@list": [{"@value": "a"}, {"@value": "b"}]}],
        }

        result = normalizer.normalize(doc)

        assert result.success
        assert result.data == {
            "and": [{"leftOperand": "Membership"}, {"leftOperand": "FrameworkAgreement"}],
            "rightOperand": ["a", "b"],
        }
        assert "unwrapped_list_node" in (result.rewrites or [])
