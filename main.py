from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
import uvicorn
from contextlib import asynccontextmanager
import datetime

# Import core modules
from core.config import settings
from utils.logger import logger

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""

    logger.info("Starting Expense Tracker Backend...")

    from connect_db import Base, engine
    from core.dependencies import set_services
    from services.cache_service import ViewCache
    import models.models  # noqa: F401 - registers tables on Base

    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables ready")
    except Exception as e:
        logger.error(f"Failed to create database tables: {e}")
        raise

    set_services(ViewCache())
    logger.info("All services initialized successfully!")

    yield

    logger.info("Shutting down Expense Tracker Backend...")
    engine.dispose()

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Backend API for tracking personal expense records",
    version=settings.VERSION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=600,  # Cache preflight requests for 10 minutes
)

app.add_middleware(
    TrustedHostMiddleware,
    allowed_hosts=settings.ALLOWED_HOSTS
)

# Import routers after app creation to avoid circular imports
from api import records

app.include_router(records.router, prefix="/api/v1/records", tags=["Records"])

@app.get("/")
async def root():
    """Root endpoint for health check."""
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.VERSION,
        "status": "running"
    }

@app.get("/health")
async def health_check_endpoint():
    """Health check endpoint."""
    try:
        return {
            "status": "healthy",
            "timestamp": datetime.datetime.utcnow().isoformat()
        }
    except Exception as e:
        logger.error(f"Health check failed: {str(e)}")
        raise HTTPException(status_code=503, detail="Service temporarily unavailable")

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        server_header=False,
        proxy_headers=True
    )
