"""Policy Validator - Semantic checks against the Catena-X vocabulary."""

from cxpolicy.core.validator.validator import PolicyValidator, ValidationOutcome

__all__ = ["PolicyValidator", "ValidationOutcome"]
