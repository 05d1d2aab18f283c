"""Main FastAPI application."""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from courtqueue.api import courts, locks, occupancy, players
from courtqueue.core.config import settings
from courtqueue.services.scheduler import sweep_scheduler

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting court queue service")
    logger.info(f"Debug mode: {settings.DEBUG}")

    # Start the periodic sweep
    await sweep_scheduler.start()

    yield

    # Shutdown
    logger.info("Shutting down court queue service")
    await sweep_scheduler.stop()


# Create FastAPI app
app = FastAPI(
    title="Court Queue",
    description="Shared court check-in, waiting queue and timed rotation",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(courts.router)
app.include_router(locks.router)
app.include_router(occupancy.router)
app.include_router(players.router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "sweep_running": sweep_scheduler.running,
        "sweep_interval_seconds": sweep_scheduler.interval_seconds,
    }
