from typing import Any, Dict, List, Optional, TypedDict


class Entity(TypedDict, total=False):
    value: str
    types: List[str]
    type: str
    isIP: bool


class SearchScope(TypedDict):
    value: str
    display: str


class LookupOptions(TypedDict, total=False):
    url: str
    accessToken: Optional[str]
    roleId: Optional[str]
    workspaceIds: Any
    searchScopes: Any
    searchLimit: int


class SearchQuery(TypedDict):
    search: str
    type: str
    limit: int


class RequestDescriptor(TypedDict):
    resultKey: str
    workspaceId: str
    scope: str
    scopeDisplay: str
    entityTypes: List[str]
    endpoint: str
    method: str
    query: SearchQuery
    responseExtractionPath: str


class ResponseEnvelope(TypedDict):
    status: int
    headers: Dict[str, str]
    body: Any


class ExecutedRequest(TypedDict):
    resultId: str
    descriptor: RequestDescriptor
    result: Any


class TypeBucket(TypedDict, total=False):
    count: int
    type: str
    items: List[Dict[str, Any]]
    summary: Dict[str, Any]


class ResultMetadata(TypedDict):
    totalResults: int
    searchScopes: List[Any]
    resultTypes: List[str]
    workspaces: List[str]


class LookupData(TypedDict):
    summary: List[str]
    details: Dict[str, Any]


class LookupResult(TypedDict):
    entity: Entity
    data: Optional[LookupData]


def build_lookup_result(
    *,
    entity: Entity,
    summary: Optional[List[str]] = None,
    details: Optional[Dict[str, Any]] = None,
) -> LookupResult:
    if details is None:
        return {"entity": entity, "data": None}
    return {
        "entity": entity,
        "data": {
            "summary": summary or [],
            "details": details,
        },
    }
