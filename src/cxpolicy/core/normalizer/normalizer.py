"""
Term Normalizer - Map JSON-LD policy documents to plain ODRL terms.

Policy definitions arrive compacted against different contexts, or even
expanded. The transformer only wants local terms, so the normalizer
rewrites the tree before any typed mapping happens.

Flow:
1. Strip known prefixes and namespace IRIs from keys
2. Unwrap @id / @value / @list nodes and single-element lists
3. Strip prefixes from term-valued fields (action, leftOperand, operator)

The input document is never modified; a new tree is returned.
"""

from dataclasses import dataclass
from typing import Any

from cxpolicy.core.vocabulary import NAMESPACES


@dataclass
class NormalizerResult:
    """Result of term normalization."""

    success: bool
    data: dict[str, Any] | None = None
    error: str | None = None
    rewrites: list[str] | None = None


class TermNormalizer:
    """Rewrite compacted or expanded JSON-LD keys and terms to local names."""

    # Fields whose values are vocabulary terms rather than literals
    TERM_FIELDS = frozenset({"action", "leftOperand", "operator", "@type"})

    # Fields whose values are literals that may be wrapped in value nodes
    LITERAL_FIELDS = frozenset({"rightOperand", "assigner", "assignee", "target"})

    def __init__(self, namespaces: dict[str, str] | None = None):
        self.namespaces = namespaces or NAMESPACES

    def normalize(self, document: Any) -> NormalizerResult:
        """
        Normalize a policy document.

        Args:
            document: Parsed JSON document

        Returns:
            NormalizerResult with the rewritten tree or an error
        """
        if not isinstance(document, dict):
            return NormalizerResult(
                success=False,
                error=f"Expected a JSON object, got: {type(document).__name__}",
            )

        rewrites: list[str] = []
        data = self._normalize_object(document, rewrites)

        return NormalizerResult(
            success=True,
            data=data,
            rewrites=sorted(set(rewrites)) or None,
        )

    def local_name(self, term: str) -> str:
        """Strip a known prefix or namespace IRI from a term."""
        for prefix, namespace in self.namespaces.items():
            if term.startswith(namespace):
                return term[len(namespace):]
            if term.startswith(f"{prefix}:"):
                return term[len(prefix) + 1:]
        return term

    def _normalize_object(self, node: dict[str, Any], rewrites: list[str]) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for key, value in node.items():
            if key == "@context":
                continue

            local_key = key if key.startswith("@") else self.local_name(key)
            if local_key != key:
                rewrites.append("stripped_key_prefix")

            if local_key in self.TERM_FIELDS:
                result[local_key] = self._normalize_term(value, rewrites)
            elif local_key in self.LITERAL_FIELDS:
                result[local_key] = self._normalize_literal(value, rewrites)
            else:
                result[local_key] = self._normalize_value(value, rewrites)
        return result

    def _normalize_value(self, value: Any, rewrites: list[str]) -> Any:
        value = self._unwrap_list_node(value, rewrites)
        if isinstance(value, dict):
            return self._normalize_object(value, rewrites)
        if isinstance(value, list):
            return [self._normalize_value(v, rewrites) for v in value]
        return value

    def _normalize_term(self, value: Any, rewrites: list[str]) -> Any:
        value = self._unwrap(value, rewrites)
        if isinstance(value, str):
            local = self.local_name(value)
            if local != value:
                rewrites.append("stripped_term_prefix")
            return local
        if isinstance(value, list):
            return [self._normalize_term(v, rewrites) for v in value]
        return self._normalize_value(value, rewrites)

    def _normalize_literal(self, value: Any, rewrites: list[str]) -> Any:
        value = self._unwrap(value, rewrites)
        value = self._unwrap_list_node(value, rewrites)
        if isinstance(value, list):
            return [self._unwrap(v, rewrites) for v in value]
        return value

    def _unwrap(self, value: Any, rewrites: list[str]) -> Any:
        """Unwrap [{"@value": x}] / {"@id": x} style nodes."""
        if isinstance(value, list) and len(value) == 1:
            rewrites.append("unwrapped_single_list")
            value = value[0]

        if isinstance(value, dict):
            for key in ("@value", "@id"):
                if key in value and len(value) <= 2:
                    rewrites.append("unwrapped_value_node")
                    return value[key]
        return value

    def _unwrap_list_node(self, value: Any, rewrites: list[str]) -> Any:
        """Unwrap {"@list": [...]} and [{"@list": [...]}] into the plain list."""
        if isinstance(value, list) and len(value) == 1:
            candidate = value[0]
        else:
            candidate = value

        if isinstance(candidate, dict) and set(candidate) == {"@list"}:
            rewrites.append("unwrapped_list_node")
            items = candidate["@list"]
            return items if isinstance(items, list) else [items]
        return value
