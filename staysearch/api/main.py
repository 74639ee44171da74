"""
FastAPI main application for stay search.
"""

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI
from contextlib import asynccontextmanager
import logging

from staysearch import __version__
from staysearch.config import get_search_settings
from staysearch.db import init_db, close_db
from staysearch.api.routers import search
from staysearch.api.routers.search import close_reverse_geocoder

# Configure logging
logging.basicConfig(
    level=get_search_settings().log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    # Startup
    logger.info("Starting Stay Search API...")
    await init_db()
    logger.info("Database initialized")

    yield

    # Shutdown
    logger.info("Shutting down Stay Search API...")
    await close_reverse_geocoder()
    await close_db()


app = FastAPI(
    title="Stay Search API",
    description="Geolocated accommodation search",
    version=__version__,
    lifespan=lifespan
)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "version": __version__
    }


app.include_router(search.router, prefix="/api", tags=["search"])
