"""
Health check API endpoints
"""

from fastapi import APIRouter, Request
from app.core.monitoring import health_checker, SystemHealth

router = APIRouter(tags=["health"])


@router.get("/health", response_model=SystemHealth)
async def health_check(request: Request):
    """
    Health check endpoint that returns system status and search configuration
    """
    adapters = getattr(request.app.state, "search_adapters", None)
    return health_checker.get_system_health(adapters)
