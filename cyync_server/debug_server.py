"""
Debug server using FastAPI for local development and testing.
Run with: uvicorn cyync_server.debug_server:app --reload --host 0.0.0.0 --port 50002
"""
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

# Load environment variables from .env file
env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)

from .core.config import get_cyync_config
from .core.error import CyyncError, CyyncLookupError
from .core.pipeline import run_lookup
from .core.preprocessor import normalize_options, validate_options
from .retrievers.base import Transport
from .search.planner import build_search_requests
from .search.scopes import get_available_scopes

logger = logging.getLogger("cyync.debug")

app = FastAPI(
    title="CYYNC Lookup Debug Server",
    description="Debug interface for CYYNC workspace lookups",
    version="1.0.0",
)

# Enable CORS for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_transport() -> Optional[Transport]:
    """
    Transport used for lookups; None lets the pipeline build one from the options.
    Tests override this dependency.
    """
    return None


class EntityModel(BaseModel):
    value: str = Field(..., description="Entity value, e.g. an IP address or domain")
    types: List[str] = Field(default_factory=list, description="Entity types, e.g. ['IPv4']")
    isIP: bool = False


class LookupRequest(BaseModel):
    """Lookup request model. Unset options fall back to the CYYNC_* environment."""

    entities: List[EntityModel] = Field(..., min_length=1)
    url: Optional[str] = None
    access_token: Optional[str] = None
    role_id: Optional[str] = None
    workspace_ids: Optional[List[str]] = None
    search_scopes: Optional[List[str]] = None
    search_limit: Optional[int] = Field(default=None, ge=1)

    def to_options(self) -> Dict[str, Any]:
        options = get_cyync_config()
        overrides = {
            "url": self.url,
            "accessToken": self.access_token,
            "roleId": self.role_id,
            "workspaceIds": self.workspace_ids,
            "searchScopes": self.search_scopes,
            "searchLimit": self.search_limit,
        }
        options.update({k: v for k, v in overrides.items() if v is not None})
        return options

    def to_entities(self) -> List[Dict[str, Any]]:
        return [entity.model_dump() for entity in self.entities]


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "CYYNC Lookup Debug Server"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/scopes")
async def scopes():
    return {"scopes": get_available_scopes()}


@app.post("/lookup", response_model=Dict[str, Any])
async def lookup(
    request: LookupRequest,
    transport: Optional[Transport] = Depends(get_transport),
) -> Dict[str, Any]:
    """
    Look up entities across the configured workspaces and scopes.
    """
    options = request.to_options()
    errors = validate_options(options)
    if errors:
        raise HTTPException(status_code=400, detail={"message": "Invalid options", "errors": errors})

    entities = request.to_entities()
    logger.info(f"Processing lookup for {[e['value'] for e in entities]}")
    try:
        results = await run_lookup(entities, options, transport)
    except CyyncLookupError as e:
        logger.error(f"Lookup error: {e.detail}")
        raise HTTPException(status_code=502, detail=e.to_dict())

    return {
        "results": results,
        "n_entities": len(results),
        "n_matched": sum(1 for r in results if r["data"] is not None),
    }


@app.post("/debug/plan")
async def debug_plan(request: LookupRequest):
    """
    Debug endpoint to see which requests a lookup would issue.
    """
    try:
        descriptors = build_search_requests(request.to_entities(), normalize_options(request.to_options()))
    except CyyncError as e:
        raise HTTPException(status_code=400, detail=e.to_dict())
    return {"n_requests": len(descriptors), "requests": descriptors}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "cyync_server.debug_server:app",
        host="0.0.0.0",
        port=50002,
        reload=True,
        log_level="info",
    )
