"""Pipeline error types.

Schema and transformation failures are caller errors; semantic invalidity
is not an error at all and never shows up here.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SchemaViolation:
    """A single structural mismatch against a registered schema."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


class PolicyValidationError(Exception):
    """Base exception for pipeline errors."""

    error_type = "PolicyValidationError"
    status_code = 500

    def __init__(self, message: str, recoverable: bool = False):
        super().__init__(message)
        self.message = message
        self.recoverable = recoverable


class ValidationFailure(PolicyValidationError):
    """Document does not conform to the schema of its declared type."""

    error_type = "ValidationFailure"
    status_code = 400

    def __init__(self, violations: list[SchemaViolation]):
        summary = "; ".join(str(v) for v in violations) or "schema validation failed"
        super().__init__(summary, recoverable=True)
        self.violations = list(violations)


class InvalidRequest(PolicyValidationError):
    """Document is schema-valid but cannot be mapped to the policy model."""

    error_type = "InvalidRequest"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message, recoverable=True)


class InternalError(PolicyValidationError):
    """Response construction or infrastructure failure."""

    error_type = "InternalError"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message, recoverable=False)
