from fastapi import APIRouter, Depends
from propinvest.core.logging import get_logger
from propinvest.db.property_store import PropertyStore, get_property_store

logger = get_logger(__name__)
router = APIRouter()

SERVICE_NAME = "Property Investment Normalizer"

@router.get("/")
async def health_check():
    """Basic health check endpoint."""
    logger.info("Health check requested")
    return {"status": "healthy", "service": SERVICE_NAME}

@router.get("/detailed")
async def detailed_health_check(store: PropertyStore = Depends(get_property_store)):
    """Detailed health check with collection information."""
    logger.info("Detailed health check requested")

    last_batch = store.last_batch
    updated_at = store.updated_at
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": "1.0.0",
        "components": {
            "property_store": {
                "properties": len(store.all()),
                "updated_at": updated_at.isoformat() if updated_at else None,
            },
            "last_ingestion": (
                "failed" if store.last_error
                else "none" if last_batch is None
                else "ok"
            ),
        }
    }
