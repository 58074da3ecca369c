"""Schema Validator - Structural checks against registered JSON schemas."""

from cxpolicy.core.schema.validator import (
    POLICY_DEFINITION_IRI,
    POLICY_DEFINITION_SCHEMA,
    POLICY_DEFINITION_TYPE,
    SchemaValidationResult,
    SchemaValidator,
)

__all__ = [
    "POLICY_DEFINITION_IRI",
    "POLICY_DEFINITION_SCHEMA",
    "POLICY_DEFINITION_TYPE",
    "SchemaValidationResult",
    "SchemaValidator",
]
