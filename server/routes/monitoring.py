"""
Monitoring and health check API routes
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response

from config import config, get_logger
from database.storage import Storage
from server.dependencies import get_db
from server.metrics import metrics, get_metrics_text
from vendors.factory import VENDOR_ADAPTERS

logger = get_logger(__name__).bind(component="api")

VERSION = "1.0.0"

router = APIRouter()


@router.get("/")
async def root(db: Storage = Depends(get_db)):
    """API status: storage health and stored counts per tool"""
    status = {
        "service": "releasewatch API",
        "version": VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "extractors": {
            key: {"tool": adapter_cls.tool_name, "active": key in config.EXTRACTORS}
            for key, adapter_cls in VENDOR_ADAPTERS.items()
        },
        "endpoints": {
            "updates": "GET /updates?tool=<substring>&limit=<n> - Recent release notes",
            "metrics": "GET /metrics - Prometheus metrics",
        },
    }

    try:
        counts = await db.updates.count_by_tool()
    except Exception as e:
        logger.error("health check failed", error=str(e))
        metrics.record_error("api", e)
        status.update({"status": "unhealthy", "error": str(e)})
        return JSONResponse(status_code=503, content=status)

    status.update({"status": "running", "updates_by_tool": counts, "total_updates": sum(counts.values())})
    return status


@router.get("/metrics")
async def prometheus_metrics():
    """Prometheus metrics endpoint"""
    return Response(content=get_metrics_text(), media_type="text/plain; version=0.0.4")
