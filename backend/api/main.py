"""
FastAPI application entry point.

Run with: uvicorn api.main:app --reload
"""
from datetime import datetime, timezone
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables from backend/.env (optional) before other imports that read env
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(env_path)

from api.routes import location  # noqa: E402
from settings import settings  # noqa: E402

API_VERSION = "0.1.0"

# Create app
app = FastAPI(
    title="City Guide POI API",
    description="Nearby points of interest, area context and time-of-day recommendations",
    version=API_VERSION,
)

# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGIN.split(",") if o.strip()] or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(location.router, prefix="/api/location", tags=["location"])


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "City Guide POI API"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": API_VERSION,
    }
