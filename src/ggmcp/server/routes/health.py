"""Health check routes."""

from typing import Any

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint.

    Returns:
        Health status.
    """
    return {"status": "healthy"}


@router.get("/ready")
async def readiness_check(request: Request) -> dict[str, Any]:
    """Readiness check endpoint.

    Returns:
        Readiness status with the number of registered tools.
    """
    return {"status": "ready", "tools": len(request.app.state.registry)}
