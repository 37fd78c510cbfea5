"""Liveness and readiness endpoints."""

import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from starter_backend.dependencies import get_database_manager
from starter_backend.managers.database import DatabaseManager

health_router = APIRouter(tags=["health"])

# Recorded when the module is first imported, i.e. at process start-up
PROCESS_STARTED_AT = time.monotonic()


def get_uptime() -> float:
    return time.monotonic() - PROCESS_STARTED_AT


@health_router.get("/health")
@health_router.get("/api/health")
async def health():
    """Liveness check: the process is up and serving requests."""
    return {"status": "ok", "uptime": get_uptime()}


@health_router.get("/api/health/ready")
async def readiness(database_manager: DatabaseManager = Depends(get_database_manager)):
    """Readiness check: the database answers a ping."""
    if await database_manager.ping():
        return {"status": "ready", "database": "connected"}
    return JSONResponse(
        status_code=503,
        content={"status": "unavailable", "database": "disconnected"},
    )
