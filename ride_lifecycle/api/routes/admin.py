"""
Admin / observability endpoints
===============================

GET /api/v1/admin/health -- simple health check with live subscriber count
"""

from fastapi import APIRouter, Depends

from ride_lifecycle.api.dependencies import get_controller
from ride_lifecycle.api.schemas import HealthResponse
from ride_lifecycle.services.controller import RideLifecycleController

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health(controller: RideLifecycleController = Depends(get_controller)):
    return HealthResponse(subscribers=controller.store.subscriber_count)
