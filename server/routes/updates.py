"""
Update query API routes
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, Response

from config import get_logger
from database.storage import Storage
from server.dependencies import get_db
from server.metrics import metrics

logger = get_logger(__name__).bind(component="api")

ALLOWED_METHODS = "GET, OPTIONS"

router = APIRouter()


@router.get("/updates")
async def list_updates(
    tool: Optional[str] = Query(None, description="Case-insensitive substring of the tool name"),
    limit: int = Query(20, ge=1, le=500),
    db: Storage = Depends(get_db),
):
    """Most recent updates first, internal identifiers stripped

    A limit outside 1..500, or one that is not an integer, is rejected with
    422 instead of falling back to the default of 20.
    """
    try:
        updates = await db.updates.search_updates(tool=tool, limit=limit)
    except Exception as e:
        logger.exception("error fetching updates", tool=tool, limit=limit)
        metrics.record_error("api", e)
        return JSONResponse(status_code=500, content={"error": str(e)})

    return [update.to_public_dict() for update in updates]


@router.options("/updates")
async def updates_options():
    return Response(status_code=200, headers={"Allow": ALLOWED_METHODS})


@router.api_route("/updates", methods=["POST", "PUT", "PATCH", "DELETE"], include_in_schema=False)
async def updates_method_not_allowed():
    return JSONResponse(
        status_code=405,
        content={"error": "Method not allowed"},
        headers={"Allow": ALLOWED_METHODS},
    )
