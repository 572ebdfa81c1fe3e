"""
Health check endpoints for monitoring and diagnostics.
"""

import time
from fastapi import APIRouter, Depends

from .. import API_VERSION
from ..models.common import HealthStatus
from ..dependencies.pinning import get_pinning_manager
from src.pinning.manager import PinningManager

router = APIRouter()

# Track server start time for uptime calculation
_server_start_time = time.time()

@router.get("/", response_model=HealthStatus)
async def health_check(pinning_manager: PinningManager = Depends(get_pinning_manager)):
    """
    Basic health check endpoint.

    Verifies the provider accepts our credentials and reports pin call
    statistics. The service reports "degraded" rather than failing when the
    provider check does not pass, since the relay itself is still up.
    """

    uptime = time.time() - _server_start_time

    dependencies = {}
    try:
        if await pinning_manager.health_check():
            dependencies[pinning_manager.provider_name] = "✅ Authenticated"
        else:
            dependencies[pinning_manager.provider_name] = "❌ Authentication failed"
    except Exception as e:
        dependencies[pinning_manager.provider_name] = f"❌ Error: {str(e)}"

    healthy = all(status.startswith("✅") for status in dependencies.values())

    return HealthStatus(
        status="healthy" if healthy else "degraded",
        version=API_VERSION,
        uptime=uptime,
        dependencies=dependencies,
        stats=pinning_manager.get_stats()
    )

@router.get("/ready")
async def readiness_check(pinning_manager: PinningManager = Depends(get_pinning_manager)):
    """
    Readiness probe for container deployments.

    Ready only when the provider has credentials to pin with.
    """
    if getattr(pinning_manager.provider, "has_credentials", True) is False:
        return {"ready": False, "reason": "Pinning provider has no credentials"}

    return {"ready": True, "message": "Service ready to handle requests"}
