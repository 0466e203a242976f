import asyncio
import logging
from typing import Dict, Any, List, Optional
from dataclasses import dataclass

import httpx
from google import genai
from google.genai import errors, types

from tripgen.config import settings
from tripgen.models.outcomes import AttemptOutcome, Success, RecoverableFailure, FatalFailure

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


# Human-readable schema documentation embedded in the instruction
ITINERARY_SCHEMA_DOCS = """{
  "destination": "City, Country",
  "duration": "X days/Y nights",
  "budgetLevel": "Budget/Mid-range/Luxury",
  "bestSeason": "Season/Months",
  "estimatedCost": "Cost range, e.g. $800-$1200",
  "highlights": ["highlight1", "highlight2", "highlight3"],
  "itinerary": [
    {
      "day": 1,
      "theme": "Day theme",
      "morning": "Activity description",
      "afternoon": "Activity description",
      "evening": "Activity description",
      "accommodation": "Hotel/lodge suggestion"
    }
  ],
  "packingTips": ["tip1", "tip2", "tip3"],
  "localCuisine": ["dish1", "dish2"],
  "safetyNotes": ["note1", "note2"]
}"""

# Status codes that mean the credential itself is unusable
FATAL_STATUS_CODES = {401, 403}
INVALID_KEY_MARKERS = ("API key not valid", "API_KEY_INVALID", "API key expired")


@dataclass
class LLMConfig:
    """Generation settings shared by every candidate model"""
    temperature: float = 0.7
    top_k: int = 40
    top_p: float = 0.95
    max_output_tokens: int = 2000


class GeminiModelClient:
    """Performs single attempts against named Gemini models"""

    def __init__(self, api_key: str, config: Optional[LLMConfig] = None, client: Any = None):
        self.config = config or LLMConfig()
        # An injected client replaces the SDK (tests, custom transports)
        self.client = client if client is not None else genai.Client(api_key=api_key)

    def _create_contents(self, system_instruction: str, user_message: str) -> List[types.Content]:
        """Create content structure for the LLM"""
        combined_message = f"{system_instruction}\n\nUser Request: {user_message}\n\nGenerate a complete itinerary based on the user's request."

        return [
            types.Content(
                role="user",
                parts=[
                    types.Part(text=combined_message)
                ]
            )
        ]

    def _create_generation_config(self) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            temperature=self.config.temperature,
            top_k=self.config.top_k,
            top_p=self.config.top_p,
            max_output_tokens=self.config.max_output_tokens,
        )

    @staticmethod
    def _extract_text(response: Any) -> Optional[str]:
        """Text of the first part of the first candidate, if any"""
        candidates = getattr(response, "candidates", None)
        if not candidates:
            return None
        content = getattr(candidates[0], "content", None)
        parts = getattr(content, "parts", None) if content is not None else None
        if not parts:
            return None
        return getattr(parts[0], "text", None)

    @staticmethod
    def _classify_api_error(error: errors.APIError) -> AttemptOutcome:
        message = error.message or str(error)
        if error.code in FATAL_STATUS_CODES or any(marker in message for marker in INVALID_KEY_MARKERS):
            return FatalFailure(message=message)
        return RecoverableFailure(message=message, status_code=error.code)

    async def attempt(
        self,
        model_id: str,
        instruction: str,
        user_text: str,
        timeout_ms: int = 10000
    ) -> AttemptOutcome:
        """
        Make one generateContent call against one model.

        Args:
            model_id: Gemini model name, e.g. "gemini-2.0-flash"
            instruction: Instruction preamble describing the output schema
            user_text: The user's free-text request
            timeout_ms: Hard wall-clock limit for the call

        Returns:
            Success, RecoverableFailure or FatalFailure. Never raises.
        """
        try:
            logger.info(f"Trying model: {model_id}")
            response = await asyncio.wait_for(
                self.client.aio.models.generate_content(
                    model=model_id,
                    contents=self._create_contents(instruction, user_text),
                    config=self._create_generation_config()
                ),
                timeout=timeout_ms / 1000
            )
        except asyncio.TimeoutError:
            return RecoverableFailure(message="timeout")
        except errors.APIError as e:
            return self._classify_api_error(e)
        except httpx.HTTPError as e:
            return RecoverableFailure(message=f"transport error: {e}")
        except Exception as e:
            return RecoverableFailure(message=f"unexpected upstream error: {e}")

        try:
            text = self._extract_text(response)
        except (AttributeError, IndexError, TypeError) as e:
            return RecoverableFailure(message=f"malformed response: {e}")

        if not text:
            return RecoverableFailure(message="empty-response")

        logger.info(f"Model {model_id} answered, response length: {len(text)}")
        return Success(raw_text=text)

    async def list_models(self) -> Dict[str, List[Any]]:
        """
        Models available to this key.

        Returns:
            {"allModels": [name, ...], "generateContentModels": [{name, displayName, description}, ...]}
        """
        all_models = []
        generate_models = []
        pager = await self.client.aio.models.list()
        async for model in pager:
            all_models.append(model.name)
            actions = getattr(model, "supported_actions", None) or []
            if "generateContent" not in actions:
                continue
            generate_models.append({
                "name": model.name,
                "displayName": getattr(model, "display_name", None),
                "description": getattr(model, "description", None),
            })
        return {"allModels": all_models, "generateContentModels": generate_models}


# Singleton instance
_model_client_instance = None

def get_model_client() -> Optional[GeminiModelClient]:
    """Get the shared Gemini client, or None when no API key is configured"""
    global _model_client_instance
    if not settings.api_key_configured:
        return None
    if _model_client_instance is None:
        _model_client_instance = GeminiModelClient(api_key=settings.gemini_api_key.strip())
    return _model_client_instance


# Predefined System Instructions
class SystemInstructions:
    """Collection of predefined system instructions"""

    @staticmethod
    def travel_planner() -> str:
        return (
            "You are an expert travel planner. Create a detailed travel itinerary in valid JSON format.\n\n"
            "IMPORTANT: Return ONLY valid JSON, no other text. "
            "Do not include explanations, markdown formatting, or any text outside the JSON.\n\n"
            f"JSON Format:\n{ITINERARY_SCHEMA_DOCS}"
        )
