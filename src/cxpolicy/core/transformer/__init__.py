"""Transformers - Context-scoped conversion between wire and typed models."""

from cxpolicy.core.transformer.registry import (
    ContextTransformerRegistry,
    TransformError,
    TransformerRegistry,
    TransformResult,
    TypeTransformer,
)
from cxpolicy.core.transformer.transformers import (
    MANAGEMENT_API_CONTEXT,
    JsonObjectToPolicyDefinition,
    PolicyValidationResultToJsonObject,
    register_transformers,
)

__all__ = [
    "MANAGEMENT_API_CONTEXT",
    "ContextTransformerRegistry",
    "JsonObjectToPolicyDefinition",
    "PolicyValidationResultToJsonObject",
    "TransformError",
    "TransformResult",
    "TransformerRegistry",
    "TypeTransformer",
    "register_transformers",
]
