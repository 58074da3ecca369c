"""
Policy Validator API - Main FastAPI application.

Entry point for the policy definition validation service.
"""

import json
import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cxpolicy import __version__
from cxpolicy.config import Settings, get_settings
from cxpolicy.core.errors import (
    InternalError,
    InvalidRequest,
    PolicyValidationError,
    ValidationFailure,
)
from cxpolicy.core.schema import SchemaValidator
from cxpolicy.core.transformer import TransformerRegistry, register_transformers
from cxpolicy.core.validator import PolicyValidator
from cxpolicy.engine import ValidationPipeline
from cxpolicy.jsonld import DocumentCache, register_cached_documents

logger = logging.getLogger(__name__)


# Global instances
document_cache = DocumentCache()
pipeline: ValidationPipeline | None = None


def build_pipeline(settings: Settings) -> ValidationPipeline:
    """Wire the validation pipeline from its collaborators."""
    transformers = TransformerRegistry()
    register_transformers(transformers, context=settings.transformation_context)

    return ValidationPipeline(
        schema_validator=SchemaValidator.with_defaults(),
        transformer_registry=transformers,
        policy_validator=PolicyValidator(),
        context=settings.transformation_context,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - setup and teardown."""
    global pipeline

    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    pipeline = build_pipeline(settings)

    # Best effort: failures are logged inside and never abort startup
    register_cached_documents(document_cache, target_dir=settings.document_cache_dir)
    logger.info(f"Registered {len(document_cache)} cached json-ld document(s)")

    yield

    pipeline = None


app = FastAPI(
    title="Catena-X Policy Validator",
    description="Validation of policy definitions against the Catena-X policy profile",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Error Mapping
# =============================================================================


@app.exception_handler(PolicyValidationError)
async def policy_validation_error_handler(
    request: Request, exc: PolicyValidationError
) -> JSONResponse:
    """Map pipeline errors to 4xx/5xx responses."""
    if exc.recoverable:
        logger.info(f"Rejected request on {request.url.path}: {exc.error_type}")

    if isinstance(exc, ValidationFailure):
        content = [
            {"message": v.message, "path": v.path, "type": exc.error_type}
            for v in exc.violations
        ]
    elif isinstance(exc, InternalError):
        logger.error(f"Internal error on {request.url.path}: {exc.message}")
        content = [{"message": "Internal server error", "type": exc.error_type}]
    else:
        content = [{"message": exc.message, "type": exc.error_type}]

    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything unexpected is an opaque 500; the detail only goes to the log."""
    logger.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(
        status_code=500,
        content=[{"message": "Internal server error", "type": InternalError.error_type}],
    )


# =============================================================================
# Health Endpoint
# =============================================================================


@app.get("/health")
async def health() -> dict[str, Any]:
    """Basic health check."""
    return {
        "status": "healthy",
        "version": __version__,
        "documents": document_cache.urls(),
    }


# =============================================================================
# Validation Endpoint (v3)
# =============================================================================


@app.post("/v3/validation/policydefinition")
async def validate_policy_definition_v3(request: Request) -> dict[str, Any]:
    """
    Validate a policy definition.

    Pipeline: Schema → Transform → Semantic validation → Transform

    An invalid policy is still a 200 response with isValid=false;
    only malformed requests and internal failures are errors.
    """
    if not pipeline:
        raise HTTPException(status_code=503, detail="Service not initialized")

    try:
        document = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidRequest(f"Request body is not valid JSON: {e}") from e

    return pipeline.validate(document)
