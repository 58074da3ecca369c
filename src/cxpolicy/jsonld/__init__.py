"""JSON-LD support - cached context documents."""

from cxpolicy.jsonld.cache import (
    CACHED_DOCUMENTS,
    CX_POLICY_2025_09_ODRL,
    DocumentCache,
    DocumentRegistration,
    register_cached_documents,
)

__all__ = [
    "CACHED_DOCUMENTS",
    "CX_POLICY_2025_09_ODRL",
    "DocumentCache",
    "DocumentRegistration",
    "register_cached_documents",
]
