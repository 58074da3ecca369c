"""Shared fixtures."""

import pytest

ODRL = "http://www.w3.org/ns/odrl/2/"
CX_POLICY = "https://w3id.org/catenax/2025/9/policy/"


@pytest.fixture
def expanded_policy_definition() -> dict:
    """A usage policy definition as produced by JSON-LD expansion."""
    return {
        "@id": "usage-policy",
        "@type": ["https://w3id.org/edc/v0.0.1/ns/PolicyDefinition"],
        "https://w3id.org/edc/v0.0.1/ns/policy": [
            {
                "@type": [f"{ODRL}Set"],
                f"{ODRL}permission": [
                    {
                        f"{ODRL}action": [{"@id": f"{ODRL}use"}],
                        f"{ODRL}constraint": [
                            {
                                f"{ODRL}and": [
                                    {
                                        "@list": [
                                            {
                                                f"{ODRL}leftOperand": [{"@id": f"{CX_POLICY}FrameworkAgreement"}],
                                                f"{ODRL}operator": [{"@id": f"{ODRL}eq"}],
                                                f"{ODRL}rightOperand": [{"@value": "DataExchangeGovernance:1.0"}],
                                            },
                                            {
                                                f"{ODRL}leftOperand": [{"@id": f"{CX_POLICY}UsagePurpose"}],
                                                f"{ODRL}operator": [{"@id": f"{ODRL}isAnyOf"}],
                                                f"{ODRL}rightOperand": [{"@value": "cx.core.industrycore:1"}],
                                            },
                                        ]
                                    }
                                ]
                            }
                        ],
                    }
                ],
            }
        ],
    }
