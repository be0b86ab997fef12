"""
Main application entry point
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import router as api_router
from .core.config import settings
from .core.logging import setup_logging, get_logger

# Set up logging
setup_logging()
logger = get_logger(__name__)

app = FastAPI(
    title="Property Investment Normalizer API",
    description="Normalizes loosely-structured real-estate tables into canonical records with investment metrics",
    version="1.0.0"
)

# Get CORS origins from settings
cors_origins = settings.get_cors_origins()
logger.info("Configuring CORS", allowed_origins=cors_origins)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"]
)

# Include API routes
app.include_router(api_router, prefix=settings.API_V1_STR)

@app.get("/")
async def root():
    return {"message": "Property Investment Normalizer"}

@app.get("/health")
async def health_check():
    return {"status": "healthy"}
