"""
Main FastAPI application for the AI Learning Service backend.

This is the entry point for the API that manages projects, runs AI code
analysis and generates downloadable browser plugins from the results.
"""

import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import (
    get_settings,
    get_cors_origins,
    get_system_info,
    initialize_logging,
    validate_required_settings,
)
from api.projects import router as projects_router
from api.analysis import router as analysis_router
from api.plugins import router as plugins_router
from api.dashboard import router as dashboard_router
# Import database initialization functions
from database import init_db, check_db_connection_with_retry

# Configure logging
initialize_logging()
logger = logging.getLogger(__name__)

settings = get_settings()

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Project analysis and browser plugin generation backend",
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(projects_router)
app.include_router(analysis_router)
app.include_router(plugins_router)
app.include_router(dashboard_router)


# Database initialization on startup
@app.on_event("startup")
async def startup_event():
    """Create tables and verify the database connection on startup."""
    logger.info("=== Starting AI Learning Service API server ===")

    missing = validate_required_settings()
    for setting in missing:
        logger.warning(f"✗ Missing configuration: {setting} - AI analysis will fail until it is set")

    try:
        logger.info("Step 1: Creating database tables...")
        init_db()

        logger.info("Step 2: Checking database connection...")
        if check_db_connection_with_retry(
            max_retries=settings.database_connect_retries,
            delay=settings.database_retry_delay,
        ):
            logger.info("✓ Database connection verified successfully")
        else:
            logger.error("✗ Database unreachable - requests touching the database will fail")
    except Exception as e:
        logger.error(f"Database startup error: {e}")
        logger.warning("Server starting without database - some features may not work")

    logger.info("=== AI Learning Service API server startup complete ===")


@app.get("/")
async def root():
    """Root endpoint for health check."""
    info = get_system_info()
    return {
        "message": "AI Learning Service API is running",
        "version": info["app_version"],
        "status": "healthy",
        "openai_model": info["openai_model"],
        "has_openai_key": info["has_openai_key"],
        "available_modules": [
            "projects",
            "analysis",
            "plugins",
            "dashboard"
        ]
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy"
    }


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler for unhandled errors."""
    logger.error(f"Unhandled exception: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host=settings.api_host, port=settings.api_port, reload=settings.debug)
