"""
Health check API endpoints.

Routes: GET /health, GET /health/db

Dependencies: chatflow.boundary.db
System role: Health check HTTP API
"""

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from chatflow.api.deps import get_gateway
from chatflow.boundary.db.gateway import PersistenceGateway
from chatflow.core.exceptions import PersistenceError


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/db", response_model=HealthResponse)
async def health_check_db(
    gateway: PersistenceGateway = Depends(get_gateway),
) -> HealthResponse:
    """Database health check."""
    try:
        await gateway.ping()
    except PersistenceError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Database unreachable: {e.message}",
        )
    return HealthResponse(status="healthy", message="Database connection OK")
