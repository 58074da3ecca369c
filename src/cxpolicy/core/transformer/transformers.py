"""
Transformers between JSON objects and the policy model.

JsonObjectToPolicyDefinition covers the type mismatches the schema does
not catch: a rule that is not an object, a constraint without an
operator, a logical constraint whose operands are not a list.
"""

from typing import Any

from cxpolicy.core.models import (
    AtomicConstraint,
    Constraint,
    LogicalConstraint,
    LogicalOperator,
    Policy,
    PolicyDefinition,
    PolicyType,
    PolicyValidationResult,
    Rule,
    RuleType,
)
from cxpolicy.core.normalizer import TermNormalizer
from cxpolicy.core.transformer.registry import (
    TransformError,
    TransformerRegistry,
    TypeTransformer,
)


class JsonObjectToPolicyDefinition(TypeTransformer[dict, PolicyDefinition]):
    """Map a (possibly compacted JSON-LD) policy definition to the model."""

    input_type = dict
    output_type = PolicyDefinition

    LOGICAL_OPERATORS = frozenset(op.value for op in LogicalOperator)

    def __init__(self, normalizer: TermNormalizer | None = None):
        self.normalizer = normalizer or TermNormalizer()

    def transform(self, obj: dict) -> PolicyDefinition:
        normalized = self.normalizer.normalize(obj)
        if not normalized.success or normalized.data is None:
            raise TransformError(normalized.error or "Failed to normalize document")
        data = normalized.data

        definition_id = data.get("@id")
        if definition_id is not None and not isinstance(definition_id, str):
            raise TransformError("@id must be a string")

        private_properties = data.get("privateProperties") or {}
        if not isinstance(private_properties, dict):
            raise TransformError("privateProperties must be an object")

        return PolicyDefinition(
            id=definition_id,
            policy=self._parse_policy(self._single_object(data.get("policy"), "policy")),
            private_properties=private_properties,
        )

    def _parse_policy(self, node: dict[str, Any]) -> Policy:
        policy_type = node.get("@type", PolicyType.SET.value)
        try:
            policy_type = PolicyType(policy_type)
        except (ValueError, TypeError):
            raise TransformError(f"Unknown policy type: {policy_type}") from None

        rules = {
            rule_type: [
                self._parse_rule(rule, f"{rule_type.value}[{i}]")
                for i, rule in enumerate(self._object_list(node.get(rule_type.value), rule_type.value))
            ]
            for rule_type in RuleType
        }

        return Policy(
            type=policy_type,
            permissions=rules[RuleType.PERMISSION],
            prohibitions=rules[RuleType.PROHIBITION],
            obligations=rules[RuleType.OBLIGATION],
            assigner=self._optional_string(node.get("assigner"), "assigner"),
            assignee=self._optional_string(node.get("assignee"), "assignee"),
            target=self._optional_string(node.get("target"), "target"),
        )

    def _parse_rule(self, node: dict[str, Any], path: str) -> Rule:
        action = node.get("action")
        if action is None:
            raise TransformError(f"{path}: missing action")
        if not isinstance(action, str):
            raise TransformError(f"{path}.action: must be a string, got {type(action).__name__}")

        constraints = [
            self._parse_constraint(c, f"{path}.constraint[{i}]")
            for i, c in enumerate(self._object_list(node.get("constraint"), f"{path}.constraint"))
        ]
        return Rule(action=action, constraints=constraints)

    def _parse_constraint(self, node: dict[str, Any], path: str) -> Constraint:
        operator = self._logical_operator(node)
        if operator is not None:
            operands = node[operator]
            if not isinstance(operands, list):
                raise TransformError(f"{path}.{operator}: logical operands must be a list")
            return LogicalConstraint(
                operator=operator,
                constraints=[
                    self._parse_constraint(
                        self._require_object(c, f"{path}.{operator}[{i}]"),
                        f"{path}.{operator}[{i}]",
                    )
                    for i, c in enumerate(operands)
                ],
            )

        for key in ("leftOperand", "operator"):
            if key not in node:
                raise TransformError(f"{path}: missing {key}")
            if not isinstance(node[key], str):
                raise TransformError(f"{path}.{key}: must be a string")
        if "rightOperand" not in node:
            raise TransformError(f"{path}: missing rightOperand")

        return AtomicConstraint(
            left_operand=node["leftOperand"],
            operator=node["operator"],
            right_operand=self._literal(node["rightOperand"], f"{path}.rightOperand"),
        )

    def _logical_operator(self, node: dict[str, Any]) -> str | None:
        """Return the operator key if node is a logical constraint."""
        for key in node:
            if key in self.LOGICAL_OPERATORS:
                return key

        if node.get("@type") == "LogicalConstraint":
            keys = [k for k in node if not k.startswith("@")]
            if len(keys) != 1:
                raise TransformError("LogicalConstraint must have exactly one operator")
            return keys[0]
        return None

    def _literal(self, value: Any, path: str) -> Any:
        if isinstance(value, list):
            for item in value:
                if isinstance(item, (dict, list)):
                    raise TransformError(f"{path}: must be a literal or a list of literals")
            return list(value)
        if isinstance(value, dict):
            raise TransformError(f"{path}: must be a literal or a list of literals")
        return value

    def _single_object(self, value: Any, path: str) -> dict[str, Any]:
        # Expanded JSON-LD wraps single nodes in a list
        if isinstance(value, list) and len(value) == 1:
            value = value[0]
        return self._require_object(value, path)

    def _object_list(self, value: Any, path: str) -> list[dict[str, Any]]:
        if value is None:
            return []
        if isinstance(value, dict):
            return [value]
        if not isinstance(value, list):
            raise TransformError(f"{path}: must be an object or a list of objects")
        return [self._require_object(v, f"{path}[{i}]") for i, v in enumerate(value)]

    def _require_object(self, value: Any, path: str) -> dict[str, Any]:
        if not isinstance(value, dict):
            raise TransformError(f"{path}: must be an object, got {type(value).__name__}")
        return value

    def _optional_string(self, value: Any, path: str) -> str | None:
        if value is None or isinstance(value, str):
            return value
        raise TransformError(f"{path}: must be a string")


class PolicyValidationResultToJsonObject(TypeTransformer[PolicyValidationResult, dict]):
    """Serialize the validation answer for the wire."""

    input_type = PolicyValidationResult
    output_type = dict

    def transform(self, obj: PolicyValidationResult) -> dict:
        if not obj.is_valid and not obj.messages:
            raise TransformError("Invalid result without messages")
        return {
            "isValid": obj.is_valid,
            "messages": list(obj.messages),
        }


MANAGEMENT_API_CONTEXT = "management-api"


def register_transformers(registry: TransformerRegistry, context: str = MANAGEMENT_API_CONTEXT) -> None:
    """Register the policy validation transformers for a context."""
    registry.register(JsonObjectToPolicyDefinition(), context=context)
    registry.register(PolicyValidationResultToJsonObject(), context=context)
