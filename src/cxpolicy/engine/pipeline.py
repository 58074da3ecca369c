"""
Validation Pipeline - Orchestrates policy definition validation.

The pipeline is responsible for:
1. Schema validation of the raw document
2. Transformation into the typed policy model
3. Semantic validation of the policy
4. Transformation of the verdict back into a JSON object

Stages 1, 2 and 4 fail fast with an exception. Stage 3 never does: an
invalid policy is a valid answer and is returned as data.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from cxpolicy.core.errors import InternalError, InvalidRequest, ValidationFailure
from cxpolicy.core.models import PolicyDefinition, PolicyValidationResult
from cxpolicy.core.schema import POLICY_DEFINITION_TYPE, SchemaValidator
from cxpolicy.core.transformer import MANAGEMENT_API_CONTEXT, TransformerRegistry
from cxpolicy.core.validator import PolicyValidator

logger = logging.getLogger(__name__)


class PipelineStage(str, Enum):
    """Stages a validation run passes through, in order."""

    RECEIVED = "RECEIVED"
    SCHEMA_CHECKED = "SCHEMA_CHECKED"
    TRANSFORMED = "TRANSFORMED"
    SEMANTICALLY_CHECKED = "SEMANTICALLY_CHECKED"
    RESPONDED = "RESPONDED"


@dataclass
class PipelineRun:
    """Trace of a single validation run."""

    stage: PipelineStage = PipelineStage.RECEIVED
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    duration_ms: int | None = None
    error: str | None = None

    def advance(self, stage: PipelineStage) -> None:
        self.stage = stage


class ValidationPipeline:
    """
    Policy definition validation pipeline.

    All collaborators are passed in explicitly. The transformer registry
    is bound to its context once, at construction time.
    """

    def __init__(
        self,
        schema_validator: SchemaValidator,
        transformer_registry: TransformerRegistry,
        policy_validator: PolicyValidator,
        context: str = MANAGEMENT_API_CONTEXT,
        document_type: str = POLICY_DEFINITION_TYPE,
    ):
        self.schemas = schema_validator
        self.transformers = transformer_registry.for_context(context)
        self.policy_validator = policy_validator
        self.document_type = document_type

    def validate(self, document: Any) -> dict[str, Any]:
        """
        Validate a policy definition document.

        Args:
            document: Parsed JSON request body

        Returns:
            Response JSON object with isValid and messages

        Raises:
            ValidationFailure: Document does not match the schema
            InvalidRequest: Document cannot be mapped to a policy definition
            InternalError: Response body could not be built
        """
        run = PipelineRun()
        start = time.perf_counter()

        try:
            return self._run(document, run)
        except (ValidationFailure, InvalidRequest, InternalError) as e:
            run.error = e.error_type
            raise
        finally:
            run.duration_ms = int((time.perf_counter() - start) * 1000)
            logger.debug(
                f"Validation run started {run.started_at.isoformat()} reached "
                f"{run.stage.value} in {run.duration_ms}ms"
                + (f" ({run.error})" if run.error else "")
            )

    def _run(self, document: Any, run: PipelineRun) -> dict[str, Any]:
        # Step 1: Schema
        schema_result = self.schemas.validate(self.document_type, document)
        if not schema_result.valid:
            logger.info(f"Rejected policy definition: {len(schema_result.violations)} schema violation(s)")
            raise ValidationFailure(schema_result.violations)
        run.advance(PipelineStage.SCHEMA_CHECKED)

        # Step 2: Document -> PolicyDefinition
        transformed = self.transformers.transform(document, PolicyDefinition)
        if not transformed.success or transformed.data is None:
            logger.info(f"Rejected policy definition: {transformed.error}")
            raise InvalidRequest(transformed.error or "Could not read policy definition")
        policy_definition = transformed.data
        run.advance(PipelineStage.TRANSFORMED)

        # Step 3: Semantic validation - failure here is an answer, not an error
        outcome = self.policy_validator.validate(policy_definition.policy)
        result = PolicyValidationResult(
            is_valid=outcome.succeeded,
            messages=list(outcome.messages),
        )
        run.advance(PipelineStage.SEMANTICALLY_CHECKED)

        # Step 4: PolicyValidationResult -> JSON object
        response = self.transformers.transform(result, dict)
        if not response.success or response.data is None:
            logger.error(f"Error creating response body: {response.error}")
            raise InternalError(f"Error creating response body: {response.error}")
        run.advance(PipelineStage.RESPONDED)

        return response.data
