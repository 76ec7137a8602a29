"""
FastAPI application entry point.

Run with: uvicorn api.main:app --reload
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from backend/.env (optional) before other imports that read env
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(env_path)

from api.routes import locations
from services.location_resolver import get_default_resolver
from settings import settings

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Create app
app = FastAPI(
    title="Job Board Location API",
    description="Location autocomplete for job postings: curated places first, Nominatim fallback",
    version="0.1.0",
)

# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure properly for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(locations.router, prefix="/locations", tags=["locations"])


@app.on_event("startup")
def startup_event():
    """Build the shared resolver (cache + geocoding client) once."""
    get_default_resolver()


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "Job Board Location API"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
