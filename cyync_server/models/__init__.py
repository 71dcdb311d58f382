"""Models module: data schemas and types."""
from .schema import (
    Entity,
    ExecutedRequest,
    LookupData,
    LookupOptions,
    LookupResult,
    RequestDescriptor,
    ResponseEnvelope,
    ResultMetadata,
    SearchQuery,
    SearchScope,
    TypeBucket,
    build_lookup_result,
)

__all__ = [
    "Entity",
    "ExecutedRequest",
    "LookupData",
    "LookupOptions",
    "LookupResult",
    "RequestDescriptor",
    "ResponseEnvelope",
    "ResultMetadata",
    "SearchQuery",
    "SearchScope",
    "TypeBucket",
    "build_lookup_result",
]
