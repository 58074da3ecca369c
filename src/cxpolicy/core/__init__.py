"""Core - Policy model, vocabulary and the three validation stages."""

from cxpolicy.core.errors import (
    InternalError,
    InvalidRequest,
    PolicyValidationError,
    SchemaViolation,
    ValidationFailure,
)
from cxpolicy.core.models import (
    Action,
    AtomicConstraint,
    LogicalConstraint,
    LogicalOperator,
    Operator,
    Policy,
    PolicyDefinition,
    PolicyType,
    PolicyValidationResult,
    Rule,
    RuleType,
)

__all__ = [
    "Action",
    "AtomicConstraint",
    "InternalError",
    "InvalidRequest",
    "LogicalConstraint",
    "LogicalOperator",
    "Operator",
    "Policy",
    "PolicyDefinition",
    "PolicyType",
    "PolicyValidationError",
    "PolicyValidationResult",
    "Rule",
    "RuleType",
    "SchemaViolation",
    "ValidationFailure",
]
