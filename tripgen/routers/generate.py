from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from typing import Optional
import logging

from tripgen.config import settings
from tripgen.models.itinerary import TravelRequest, FailureEnvelope
from tripgen.services.itinerary_service import ItineraryService, get_itinerary_service, PROMPT_TOO_SHORT
from tripgen.services.llm_service import GeminiModelClient, get_model_client

router = APIRouter(tags=["itinerary"])
logger = logging.getLogger(__name__)


@router.post("/generate")
async def generate_itinerary(
    request: TravelRequest,
    service: ItineraryService = Depends(get_itinerary_service)
):
    """
    Generate a travel itinerary from free text. Falls back to mock data
    when Gemini is unavailable, so only bad input or internal errors fail.
    """
    envelope = await service.generate(request.promptText)

    status_code = status.HTTP_200_OK
    if isinstance(envelope, FailureEnvelope):
        if envelope.errorMessage == PROMPT_TOO_SHORT:
            status_code = status.HTTP_400_BAD_REQUEST
        else:
            status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    return JSONResponse(status_code=status_code, content=envelope.model_dump(exclude_none=True))


@router.get("/models")
async def list_models(client: Optional[GeminiModelClient] = Depends(get_model_client)):
    """List Gemini models usable for generateContent with the configured key"""
    if client is None:
        return {
            "error": "API key not configured",
            "suggestion": "Create .env file with GEMINI_API_KEY=your_key",
            "availableModels": settings.candidate_models
        }

    try:
        models = await client.list_models()
    except Exception as e:
        logger.error(f"Error fetching models: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(e), "availableModels": settings.candidate_models}
        )

    return {
        "allModels": models["allModels"],
        "generateContentModels": models["generateContentModels"],
        "count": len(models["generateContentModels"])
    }
