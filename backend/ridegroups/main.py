"""
RideGroups API

FastAPI application for cycling groups, shared rides and Strava import.
"""

from contextlib import asynccontextmanager
import logging
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ridegroups.config import settings
from ridegroups.db.session import init_db
from ridegroups.api.exception_handlers import register_exception_handlers
from ridegroups.api.v1.router import api_router


# === Logging Setup ===
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout),
    ]
)
logger = logging.getLogger(__name__)


# === Lifespan ===
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Starting RideGroups API...")
    await init_db()
    logger.info("Database initialized")

    if not (settings.strava_client_id and settings.strava_client_secret):
        logger.info("Strava not configured (STRAVA_CLIENT_ID / STRAVA_CLIENT_SECRET)")
    if not (settings.google_client_id and settings.google_client_secret):
        logger.info("Google sign-in not configured (GOOGLE_CLIENT_ID / GOOGLE_CLIENT_SECRET)")

    yield

    logger.info("Shutting down...")


# === App Creation ===
app = FastAPI(
    title="RideGroups API",
    description="Cycling groups with Strava ride import and weekly stats",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# === Middleware ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# === Error Handlers ===
register_exception_handlers(app)


# === Routes ===
app.include_router(api_router, prefix="/api/v1")


# === Health Check ===
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": "0.1.0"}
