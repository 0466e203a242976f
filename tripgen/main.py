import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tripgen.config import settings
from tripgen.routers import generate

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


def log_configuration():
    logger.info(f"API Key Status: {'Configured' if settings.api_key_configured else 'Not configured'}")
    for i, model in enumerate(settings.candidate_models, start=1):
        logger.info(f"Candidate model {i}: {model}")
    mode = "Gemini API with mock fallback" if settings.api_key_configured else "Mock data only"
    logger.info(f"Mode: {mode}")
    if not settings.api_key_configured:
        logger.warning("To use real AI, create .env file with GEMINI_API_KEY=your_api_key_here")


@asynccontextmanager
async def lifespan(app: FastAPI):
    log_configuration()
    yield


# Initialize FastAPI app
app = FastAPI(
    title="AI Travel Itinerary API",
    version="0.01",
    description="Gemini-powered travel itinerary generation with mock fallback",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(generate.router, prefix="/api/v1")


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {
        "status": "ok",
        "apiKeyConfigured": settings.api_key_configured,
        "availableModels": settings.candidate_models,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "note": "Using Gemini API" if settings.api_key_configured else "Using mock data only"
    }


@app.get("/")
def root():
    return {
        "message": "AI Travel Itinerary API",
        "endpoints": ["/health", "/api/v1/generate", "/api/v1/models"]
    }


if __name__ == "__main__":
    uvicorn.run("tripgen.main:app", host="0.0.0.0", port=settings.port)
