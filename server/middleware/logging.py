"""
Request/response logging middleware
"""


import time
from fastapi import Request

from config import get_logger

logger = get_logger(__name__).bind(component="api")


async def log_requests(request: Request, call_next):
    """Log incoming requests and responses"""
    # Skip logging for metrics endpoint (Prometheus scraping noise)
    if request.url.path == "/metrics":
        return await call_next(request)

    start_time = time.time()

    try:
        response = await call_next(request)
        duration = time.time() - start_time

        logger.info(
            "request",
            method=request.method,
            path=request.url.path,
            query=str(request.url.query)[:100] or None,
            status_code=response.status_code,
            duration_seconds=round(duration, 3),
        )
        return response

    except Exception as e:
        duration = time.time() - start_time
        logger.error(
            "request failed",
            method=request.method,
            path=request.url.path,
            error=str(e),
            duration_seconds=round(duration, 3),
        )
        raise
