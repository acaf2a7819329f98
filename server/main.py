"""
releasewatch API Server

Read-only query API over stored release notes.
Routes, middleware and metrics are organized into focused modules.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import config, get_logger
from database.storage import open_database
from server.middleware.logging import log_requests
from server.middleware.metrics import metrics_middleware
from server.routes import monitoring, updates

logger = get_logger(__name__).bind(component="api")


# Lifespan context manager for database initialization
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open storage on startup, close it on shutdown"""
    db = await open_database()
    await db.init_schema()
    logger.info("storage ready", postgres=config.USE_POSTGRES)

    app.state.db = db

    yield

    try:
        await db.close()
        logger.info("storage closed")
    except Exception as e:
        # Don't crash on shutdown - log and continue
        logger.error("error closing storage", error=str(e), exc_info=True)


app = FastAPI(title="releasewatch API", description="Vendor security tool release notes", lifespan=lifespan)

# Public read-only API
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["Content-Type"],
)


# FastAPI middleware stack: last registered runs first
@app.middleware("http")
async def log_requests_middleware(request, call_next):
    return await log_requests(request, call_next)


@app.middleware("http")
async def metrics_middleware_wrapper(request, call_next):
    return await metrics_middleware(request, call_next)


app.include_router(monitoring.router)  # Status and Prometheus endpoints
app.include_router(updates.router)     # Update query endpoint


if __name__ == "__main__":
    import uvicorn

    logger.info("starting releasewatch API server")
    logger.info("configuration", config_summary=config.summary())

    uvicorn.run(
        app,
        host=config.API_HOST,
        port=config.API_PORT,
        access_log=False,  # Custom middleware logs requests
    )
