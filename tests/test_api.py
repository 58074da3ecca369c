"""Tests for the policy validation HTTP API."""

import json
import logging
from typing import Any

import pytest
from fastapi.testclient import TestClient
from starlette.requests import Request

from cxpolicy import main
from cxpolicy.core.errors import InternalError, InvalidRequest, SchemaViolation, ValidationFailure
from cxpolicy.core.models import Policy
from cxpolicy.core.validator import PolicyValidator, ValidationOutcome
from cxpolicy.engine import ValidationPipeline
from cxpolicy.jsonld import CX_POLICY_2025_09_ODRL
from cxpolicy.main import app, policy_validation_error_handler

ENDPOINT = "/v3/validation/policydefinition"


def usage_policy_definition(purpose: str = "cx.core.industrycore:1") -> dict[str, Any]:
    return {
        "@context": {
            "@vocab": "https://w3id.org/edc/v0.0.1/ns/",
            "odrl": "http://www.w3.org/ns/odrl/2/",
            "cx-policy": "https://w3id.org/catenax/2025/9/policy/",
        },
        "@type": "PolicyDefinition",
        "@id": "usage-policy",
        "policy": {
            "@type": "Set",
            "permission": [
                {
                    "action": "use",
                    "constraint": {
                        "and": [
                            {
                                "leftOperand": "cx-policy:FrameworkAgreement",
                                "operator": "eq",
                                "rightOperand": "DataExchangeGovernance:1.0",
                            },
                            {
                                "leftOperand": "cx-policy:UsagePurpose",
                                "operator": "isAnyOf",
                                "rightOperand": purpose,
                            },
                        ]
                    },
                }
            ],
        },
    }


class SilentFailureValidator(PolicyValidator):
    def validate(self, policy: Policy) -> ValidationOutcome:
        return ValidationOutcome(succeeded=False)


class ExplodingValidator(PolicyValidator):
    def validate(self, policy: Policy) -> ValidationOutcome:
        raise RuntimeError("boom")


def pipeline_with(policy_validator: PolicyValidator) -> ValidationPipeline:
    pipeline = main.build_pipeline(main.get_settings())
    pipeline.policy_validator = policy_validator
    return pipeline


class TestValidationEndpoint:
    """Test POST /v3/validation/policydefinition."""

    @pytest.fixture
    def client(self):
        with TestClient(app) as client:
            yield client

    def test_valid_policy_returns_200(self, client: TestClient) -> None:
        """A valid policy is answered with isValid true."""
        response = client.post(ENDPOINT, json=usage_policy_definition())

        assert response.status_code == 200
        assert response.json() == {"isValid": True, "messages": []}

    def test_invalid_policy_returns_200(self, client: TestClient) -> None:
        """Semantic invalidity is still a successful request."""
        doc = usage_policy_definition()
        doc["policy"]["permission"][0]["action"] = "access"

        response = client.post(ENDPOINT, json=doc)

        assert response.status_code == 200
        body = response.json()
        assert body["isValid"] is False
        assert body["messages"] == [
            "leftOperand UsagePurpose not allowed in permission for action access",
        ]

    def test_schema_violation_returns_400(self, client: TestClient) -> None:
        """Structural problems are a 400 without a verdict."""
        response = client.post(ENDPOINT, json={"@type": "PolicyDefinition"})

        assert response.status_code == 400
        body = response.json()
        assert "isValid" not in body
        assert body == [
            {
                "message": "missing required property 'policy'",
                "path": "$",
                "type": "ValidationFailure",
            }
        ]

    def test_unmappable_policy_returns_400(self, client: TestClient) -> None:
        """Schema-valid documents that cannot be mapped are a 400."""
        response = client.post(ENDPOINT, json={"policy": {"permission": [{"constraint": []}]}})

        assert response.status_code == 400
        assert response.json() == [
            {"message": "permission[0]: missing action", "type": "InvalidRequest"}
        ]

    def test_malformed_json_returns_400(self, client: TestClient) -> None:
        """A body that is not JSON is an invalid request."""
        response = client.post(
            ENDPOINT,
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body[0]["type"] == "InvalidRequest"
        assert body[0]["message"].startswith("Request body is not valid JSON")

    def test_response_failure_returns_500(self, client: TestClient) -> None:
        """An unserializable verdict is an internal error without detail."""
        main.pipeline = pipeline_with(SilentFailureValidator())

        response = client.post(ENDPOINT, json=usage_policy_definition())

        assert response.status_code == 500
        assert response.json() == [{"message": "Internal server error", "type": "InternalError"}]

    def test_identical_requests_identical_answers(self, client: TestClient) -> None:
        """The endpoint keeps no state between requests."""
        doc = usage_policy_definition("unknown purpose ")

        first = client.post(ENDPOINT, json=doc)
        second = client.post(ENDPOINT, json=doc)

        assert first.status_code == second.status_code == 200
        assert first.json() == second.json()

    def test_not_initialized_returns_503(self) -> None:
        """Requests before startup are refused."""
        client = TestClient(app)

        response = client.post(ENDPOINT, json=usage_policy_definition())

        assert response.status_code == 503
        assert response.json() == {"detail": "Service not initialized"}


class TestUnexpectedErrors:
    """Test the catch-all error handler."""

    def test_unhandled_exception_returns_generic_500(self) -> None:
        """Unexpected exceptions never leak their detail."""
        with TestClient(app, raise_server_exceptions=False) as client:
            main.pipeline = pipeline_with(ExplodingValidator())

            response = client.post(ENDPOINT, json=usage_policy_definition())

        assert response.status_code == 500
        assert response.json() == [{"message": "Internal server error", "type": "InternalError"}]
        assert "boom" not in response.text


class TestHealth:
    """Test the health endpoint."""

    def test_health(self) -> None:
        """Health is available without startup."""
        response = TestClient(app).get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_health_lists_cached_documents(self) -> None:
        """Cached JSON-LD documents registered at startup are reported."""
        with TestClient(app) as client:
            response = client.get("/health")

        assert CX_POLICY_2025_09_ODRL in response.json()["documents"]


class TestErrorHandler:
    """Test error mapping directly."""

    @pytest.fixture
    def request_scope(self) -> Request:
        return Request(
            {
                "type": "http",
                "method": "POST",
                "path": ENDPOINT,
                "headers": [],
                "query_string": b"",
            }
        )

    @pytest.mark.asyncio
    async def test_validation_failure_lists_every_violation(self, request_scope: Request) -> None:
        """Each schema violation becomes one entry."""
        exc = ValidationFailure(
            [SchemaViolation("$.policy", "'use' is not of type 'object'"), SchemaViolation("$['@id']", "'' is too short")]
        )

        response = await policy_validation_error_handler(request_scope, exc)

        assert response.status_code == 400
        assert json.loads(response.body) == [
            {"message": "'use' is not of type 'object'", "path": "$.policy", "type": "ValidationFailure"},
            {"message": "'' is too short", "path": "$['@id']", "type": "ValidationFailure"},
        ]

    @pytest.mark.asyncio
    async def test_internal_error_hides_detail(self, request_scope: Request) -> None:
        """Internal errors only report a generic message."""
        exc = InternalError("Error creating response body: Invalid result without messages")

        response = await policy_validation_error_handler(request_scope, exc)

        assert response.status_code == 500
        assert json.loads(response.body) == [
            {"message": "Internal server error", "type": "InternalError"}
        ]

    @pytest.mark.asyncio
    async def test_recoverable_errors_are_logged_as_rejections(
        self, request_scope: Request, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Caller errors are logged at info, server errors are not."""
        with caplog.at_level(logging.INFO, logger="cxpolicy.main"):
            await policy_validation_error_handler(request_scope, InvalidRequest("permission[0]: missing action"))
            await policy_validation_error_handler(request_scope, InternalError("boom"))

        rejections = [r for r in caplog.records if r.getMessage().startswith("Rejected request")]
        assert [r.getMessage() for r in rejections] == [f"Rejected request on {ENDPOINT}: InvalidRequest"]
