"""
Policy Validator - Semantic checks against the Catena-X vocabulary.

The validator runs on a typed Policy that already passed the schema and
transformation stages. It enforces:
1. Supported actions, one action per policy
2. Rule placement - which left operands may appear where
3. Operators and right operands per constraint definition

Every violation is reported; evaluation never stops at the first one.
"""

import logging
from dataclasses import dataclass, field

from cxpolicy.core import vocabulary
from cxpolicy.core.models import (
    Action,
    AtomicConstraint,
    Constraint,
    LogicalConstraint,
    LogicalOperator,
    Operator,
    Policy,
    Rule,
    RuleType,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationOutcome:
    """Verdict of a semantic check. Frozen once returned."""

    succeeded: bool
    messages: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_messages(cls, messages: list[str]) -> "ValidationOutcome":
        return cls(succeeded=not messages, messages=tuple(messages))


class PolicyValidator:
    """
    Validate a policy against the Catena-X policy profile.

    Stateless: the vocabulary is read-only and no per-call state survives
    a call, so one instance can serve concurrent requests.
    """

    KNOWN_OPERATORS = frozenset(op.value for op in Operator)
    KNOWN_LOGICAL_OPERATORS = frozenset(op.value for op in LogicalOperator)
    CONJUNCTIVE_OPERATORS = frozenset({LogicalOperator.AND.value, LogicalOperator.AND_SEQUENCE.value})

    def validate(self, policy: Policy) -> ValidationOutcome:
        """
        Validate a typed policy.

        Args:
            policy: Policy produced by the transformer

        Returns:
            ValidationOutcome with every violation message
        """
        messages: list[str] = []
        rules = policy.rules()

        if not rules:
            messages.append("policy contains no rules")
            return ValidationOutcome.from_messages(messages)

        actions = sorted({r.action for _, r in rules if self._parse_action(r.action)})
        if len(actions) > 1:
            messages.append(f"mixed actions in policy: {', '.join(actions)}")

        for rule_type, rule in rules:
            self._validate_rule(rule_type, rule, messages)

        if messages:
            logger.debug(f"Policy rejected with {len(messages)} violation(s)")

        return ValidationOutcome.from_messages(messages)

    def _parse_action(self, value: str) -> Action | None:
        try:
            return Action(value)
        except ValueError:
            return None

    def _validate_rule(self, rule_type: RuleType, rule: Rule, messages: list[str]) -> None:
        action = self._parse_action(rule.action)
        if action is None:
            messages.append(f"unsupported action: {rule.action}")

        # Access policies only grant; placement of their constraints is moot otherwise
        placement_checked = True
        if action == Action.ACCESS and rule_type != RuleType.PERMISSION:
            messages.append(f"{rule_type.value} not allowed for action {action.value}")
            placement_checked = False

        for constraint in rule.constraints:
            self._validate_constraint(
                constraint,
                rule_type,
                action if placement_checked else None,
                messages,
            )

        seen: set[str] = set()
        for left_operand in self._conjunctive_left_operands(rule.constraints):
            if left_operand in seen:
                messages.append(f"duplicate leftOperand {left_operand} in {rule_type.value}")
            seen.add(left_operand)

    def _validate_constraint(
        self,
        constraint: Constraint,
        rule_type: RuleType,
        action: Action | None,
        messages: list[str],
    ) -> None:
        if isinstance(constraint, LogicalConstraint):
            self._validate_logical(constraint, rule_type, action, messages)
        else:
            self._validate_atomic(constraint, rule_type, action, messages)

    def _validate_logical(
        self,
        constraint: LogicalConstraint,
        rule_type: RuleType,
        action: Action | None,
        messages: list[str],
    ) -> None:
        if constraint.operator not in self.KNOWN_LOGICAL_OPERATORS:
            messages.append(f"unsupported logical operator: {constraint.operator}")

        if not constraint.constraints:
            messages.append("empty logical constraint")
            return

        for child in constraint.constraints:
            self._validate_constraint(child, rule_type, action, messages)

    def _validate_atomic(
        self,
        constraint: AtomicConstraint,
        rule_type: RuleType,
        action: Action | None,
        messages: list[str],
    ) -> None:
        left = constraint.left_operand
        operator = constraint.operator

        operator_known = operator in self.KNOWN_OPERATORS
        if not operator_known:
            messages.append(f"unsupported operator: {operator}")

        definition = vocabulary.get_constraint(left)
        if definition is None:
            messages.append(f"unsupported leftOperand: {left}")
            return

        if action is not None and left not in vocabulary.allowed_left_operands(action, rule_type):
            messages.append(
                f"leftOperand {left} not allowed in {rule_type.value} for action {action.value}"
            )

        if operator_known and not definition.accepts_operator(operator):
            messages.append(f"operator {operator} not allowed for leftOperand {left}")

        for value in self._invalid_right_operands(constraint, definition):
            messages.append(f"invalid rightOperand for {left}: {value}")

    def _invalid_right_operands(
        self,
        constraint: AtomicConstraint,
        definition: vocabulary.ConstraintDefinition,
    ) -> list[object]:
        """Return the offending right operand values, if any."""
        value = constraint.right_operand

        if isinstance(value, list):
            is_list_operator = any(
                op.value == constraint.operator for op in vocabulary.LIST_OPERATORS
            )
            if not value or not is_list_operator:
                return [value]
            return [v for v in value if not definition.accepts_value(v)]

        if not definition.accepts_value(value):
            return [value]
        return []

    def _conjunctive_left_operands(self, constraints: list[Constraint]) -> list[str]:
        """Left operands that must hold together (top level and inside and-chains)."""
        result: list[str] = []
        for constraint in constraints:
            if isinstance(constraint, AtomicConstraint):
                result.append(constraint.left_operand)
            elif constraint.operator in self.CONJUNCTIVE_OPERATORS:
                result.extend(self._conjunctive_left_operands(constraint.constraints))
        return result
