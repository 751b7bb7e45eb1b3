from fastapi import FastAPI
from hits_app.config import settings
from hits_app.database.connection import engine, Base
from hits_app.logging_config import setup_logging
from hits_app.api.v1 import hits

# Import models to ensure they're registered with Base
from hits_app.models import Host, Hit

setup_logging()

# Create database tables
Base.metadata.create_all(bind=engine)

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Hit statistics: per-day request counts by host, path and status",
    debug=settings.debug
)


@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "environment": settings.environment}


######## Include routers
app.include_router(hits.router, prefix="/api/v1")
