"""Health Routes — process liveness and database readiness for the Ruby API.

Invariants:
    - /health/ answers 200 whenever the app is serving
    - /health/ready answers 503 until the database round-trips
"""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from ruby_tutor.infrastructure import database

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check(request: Request):
    return {
        "status": "healthy",
        "service": "ruby-tutor-api",
        "version": request.app.version,
    }


@router.get("/ready")
async def readiness_check():
    manager = database.db_manager
    if manager is None or not await manager.health_check():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
