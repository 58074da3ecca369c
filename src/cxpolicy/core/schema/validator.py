"""
Schema Validator - Structural checks against registered JSON schemas.

The validator answers one question: does the document have the shape its
declared type promises? It knows nothing about policy semantics; an
unsupported action passes here and is caught by the semantic validator.

Schemas are registered per document type at startup and never change
afterwards, so a single instance is safe to share between requests.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError

from cxpolicy.core.errors import SchemaViolation
from cxpolicy.core.vocabulary import EDC_NS

logger = logging.getLogger(__name__)


_SIMPLE_KEY = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

POLICY_DEFINITION_TYPE = "PolicyDefinition"
POLICY_DEFINITION_IRI = f"{EDC_NS}PolicyDefinition"

_POLICY_DEFINITION_TYPES = [
    POLICY_DEFINITION_TYPE,
    f"edc:{POLICY_DEFINITION_TYPE}",
    POLICY_DEFINITION_IRI,
]

POLICY_DEFINITION_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "PolicyDefinition",
    "type": "object",
    "properties": {
        "@id": {"type": "string", "minLength": 1},
        "@type": {
            "anyOf": [
                {"enum": _POLICY_DEFINITION_TYPES},
                {"type": "array", "contains": {"enum": _POLICY_DEFINITION_TYPES}},
            ],
        },
        "policy": {"type": "object"},
        "edc:policy": {"type": "object"},
        f"{EDC_NS}policy": {"type": ["object", "array"]},
    },
    "allOf": [
        {
            "anyOf": [
                {"required": ["policy"]},
                {"required": ["edc:policy"]},
                {"required": [f"{EDC_NS}policy"]},
            ],
            "x-message": "missing required property 'policy'",
        },
    ],
}


@dataclass
class SchemaValidationResult:
    """Result of a schema check."""

    valid: bool
    violations: list[SchemaViolation] = field(default_factory=list)


class SchemaValidator:
    """
    Registry of JSON schemas keyed by document type.

    Reports every violation, not just the first one.
    """

    def __init__(self) -> None:
        self._validators: dict[str, Draft202012Validator] = {}

    @classmethod
    def with_defaults(cls) -> "SchemaValidator":
        """Create a validator with the policy definition schema registered."""
        validator = cls()
        validator.register(POLICY_DEFINITION_TYPE, POLICY_DEFINITION_SCHEMA)
        validator.register(POLICY_DEFINITION_IRI, POLICY_DEFINITION_SCHEMA)
        return validator

    def register(self, document_type: str, schema: dict[str, Any]) -> None:
        """
        Register a schema for a document type.

        Raises:
            SchemaError: If the schema itself is not a valid JSON schema
        """
        try:
            Draft202012Validator.check_schema(schema)
        except SchemaError:
            logger.error(f"Refusing to register invalid schema for {document_type}")
            raise
        self._validators[document_type] = Draft202012Validator(schema)

    def registered_types(self) -> list[str]:
        return list(self._validators.keys())

    def validate(self, document_type: str, document: Any) -> SchemaValidationResult:
        """
        Validate a document against the schema of its declared type.

        Args:
            document_type: Registered type identifier
            document: Parsed JSON document

        Returns:
            SchemaValidationResult listing all violations
        """
        validator = self._validators.get(document_type)
        if validator is None:
            return SchemaValidationResult(
                valid=False,
                violations=[
                    SchemaViolation("$", f"no schema registered for type {document_type}")
                ],
            )

        errors = sorted(
            validator.iter_errors(document),
            key=lambda e: ([str(p) for p in e.absolute_path], e.message),
        )
        violations = [
            SchemaViolation(
                path=_json_path(error.absolute_path),
                message=error.schema.get("x-message", error.message)
                if isinstance(error.schema, dict)
                else error.message,
            )
            for error in errors
        ]

        return SchemaValidationResult(valid=not violations, violations=violations)


def _json_path(path: Any) -> str:
    """Render a jsonschema error path as $.a[0]['@type']."""
    rendered = "$"
    for element in path:
        if isinstance(element, int):
            rendered += f"[{element}]"
        elif _SIMPLE_KEY.match(element):
            rendered += f".{element}"
        else:
            rendered += f"['{element}']"
    return rendered
