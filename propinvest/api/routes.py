"""
API Routes Configuration
"""

from fastapi import APIRouter

from propinvest.api.endpoints import (
    health,
    ingestion,
    properties,
)

# Create main router
router = APIRouter()

# Include endpoint routers
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(ingestion.router, prefix="/ingestion", tags=["ingestion"])
router.include_router(properties.router, prefix="/properties", tags=["properties"])
