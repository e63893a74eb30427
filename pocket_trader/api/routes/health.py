"""Health check route"""
from datetime import datetime
from fastapi import APIRouter

from pocket_trader import __version__
from pocket_trader.models.schemas import HealthCheck
from pocket_trader.services.autotrade import broker_tabs

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthCheck)
async def health_check() -> HealthCheck:
    """
    Health check endpoint
    
    Returns:
        Health check response
    """
    return HealthCheck(
        status="healthy",
        timestamp=datetime.utcnow(),
        version=__version__,
    )


@router.get("/health/broker-tabs")
async def broker_tab_count() -> dict:
    """Number of connected broker tabs"""
    return {"connected": len(broker_tabs)}
