"""
FitTrack Backend - FastAPI Application
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fittrack import __version__
from fittrack.core.config import settings
from fittrack.core.logging import setup_logging, get_logger
from fittrack.core.database import init_db
from fittrack.api import nutrition, progress, stats, workouts

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    logger.info("Starting FitTrack Backend", version=__version__)
    await init_db()
    logger.info("Database initialized")
    
    yield
    
    # Shutdown
    logger.info("Shutting down FitTrack Backend")


app = FastAPI(
    title="FitTrack API",
    description="Personal fitness and nutrition tracking backend",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(workouts.router, prefix="/api/workout", tags=["workout"])
app.include_router(nutrition.router, prefix="/api/nutrition", tags=["nutrition"])
app.include_router(stats.router, prefix="/api/user", tags=["user"])
app.include_router(progress.router, prefix="/api/progress", tags=["progress"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "fittrack-backend"}
