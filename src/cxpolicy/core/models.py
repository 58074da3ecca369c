"""Core domain models for policy definition validation.

These models are the typed side of the pipeline:
- PolicyDefinition / Policy / Rule / Constraint (ODRL shape)
- PolicyValidationResult - the public answer of the endpoint
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Enums
# =============================================================================


class Action(str, Enum):
    """Actions supported by the Catena-X policy profile."""

    USE = "use"
    ACCESS = "access"


class Operator(str, Enum):
    """ODRL operators accepted in atomic constraints."""

    EQ = "eq"
    NEQ = "neq"
    GT = "gt"
    GTEQ = "gteq"
    LT = "lt"
    LTEQ = "lteq"
    HAS_PART = "hasPart"
    IS_A = "isA"
    IS_ALL_OF = "isAllOf"
    IS_ANY_OF = "isAnyOf"
    IS_NONE_OF = "isNoneOf"
    IS_PART_OF = "isPartOf"
    TERM_LTEQ = "term-lteq"


class LogicalOperator(str, Enum):
    """Operators of logical (composite) constraints."""

    AND = "and"
    OR = "or"
    XONE = "xone"
    AND_SEQUENCE = "andSequence"


class RuleType(str, Enum):
    """Where a rule sits inside a policy."""

    PERMISSION = "permission"
    PROHIBITION = "prohibition"
    OBLIGATION = "obligation"


class PolicyType(str, Enum):
    """ODRL policy classes."""

    SET = "Set"
    OFFER = "Offer"
    AGREEMENT = "Agreement"


# =============================================================================
# Policy Models
# =============================================================================


class AtomicConstraint(BaseModel):
    """leftOperand / operator / rightOperand triple."""

    model_config = ConfigDict(frozen=True)

    left_operand: str
    operator: str
    right_operand: Any = None


class LogicalConstraint(BaseModel):
    """Composite constraint over child constraints (and / or / xone ...)."""

    model_config = ConfigDict(frozen=True)

    operator: str
    constraints: list[Constraint] = Field(default_factory=list)


Constraint = Union[AtomicConstraint, LogicalConstraint]

LogicalConstraint.model_rebuild()


class Rule(BaseModel):
    """A permission, prohibition or obligation."""

    model_config = ConfigDict(frozen=True)

    action: str
    constraints: list[Constraint] = Field(default_factory=list)


class Policy(BaseModel):
    """ODRL policy with its three rule lists."""

    model_config = ConfigDict(frozen=True)

    type: PolicyType = PolicyType.SET
    permissions: list[Rule] = Field(default_factory=list)
    prohibitions: list[Rule] = Field(default_factory=list)
    obligations: list[Rule] = Field(default_factory=list)
    assigner: str | None = None
    assignee: str | None = None
    target: str | None = None

    def rules(self) -> list[tuple[RuleType, Rule]]:
        """All rules tagged with their rule type, in document order."""
        return (
            [(RuleType.PERMISSION, r) for r in self.permissions]
            + [(RuleType.PROHIBITION, r) for r in self.prohibitions]
            + [(RuleType.OBLIGATION, r) for r in self.obligations]
        )


class PolicyDefinition(BaseModel):
    """A named policy as submitted to the management API."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    policy: Policy
    private_properties: dict[str, Any] = Field(default_factory=dict)


# =============================================================================
# Validation Result
# =============================================================================


class PolicyValidationResult(BaseModel):
    """Answer of the validation endpoint: verdict plus every message."""

    model_config = ConfigDict(frozen=True)

    is_valid: bool
    messages: list[str] = Field(default_factory=list)
