import re
import time
import asyncio
import logging
from typing import Any, Callable, List, Optional

from tripgen.config import settings
from tripgen.models.itinerary import (
    EnvelopeMetadata,
    FailureEnvelope,
    ItineraryRecord,
    ResponseEnvelope,
    SuccessEnvelope,
    TravelRequest,
)
from tripgen.models.outcomes import Success, RecoverableFailure, FatalFailure
from tripgen.services import schema_validator
from tripgen.services.llm_service import GeminiModelClient, SystemInstructions, get_model_client
from tripgen.services.mock_itinerary import create_mock_itinerary

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

MIN_PROMPT_LENGTH = 3
PROMPT_TOO_SHORT = "prompt too short"
GENERIC_FAILURE = "Failed to generate itinerary"

NOTE_NO_KEY = "No API key configured"
NOTE_UPSTREAM_UNAVAILABLE = "Gemini API unavailable"

_CODE_FENCE_OPEN = re.compile(r"^\s*```[\w-]*[ \t]*\n?")
_CODE_FENCE_CLOSE = re.compile(r"\n?```\s*$")


def strip_code_fences(text: str) -> str:
    """Remove a leading ```lang and trailing ``` around model output"""
    text = _CODE_FENCE_OPEN.sub("", text, count=1)
    text = _CODE_FENCE_CLOSE.sub("", text, count=1)
    return text.strip()


class ItineraryService:
    """Generates itineraries from Gemini candidates in priority order, with mock fallback"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        candidate_models: Optional[List[str]] = None,
        attempt_timeout_ms: int = 10000,
        mock_delay_ms: int = 800,
        model_client: Any = None,
        mock_generator: Callable[[str], ItineraryRecord] = create_mock_itinerary,
    ):
        self.candidate_models = list(candidate_models or [])
        self.attempt_timeout_ms = attempt_timeout_ms
        self.mock_delay_ms = mock_delay_ms
        self.mock_generator = mock_generator
        self.instruction = SystemInstructions.travel_planner()

        # No key is a supported mode: every request is served from mock data
        if model_client is not None:
            self.model_client = model_client
        elif api_key and api_key.strip():
            self.model_client = GeminiModelClient(api_key=api_key.strip())
        else:
            self.model_client = None

        if self.model_client is None:
            logger.warning("No Gemini API key configured - using mock itineraries only")

    @property
    def using_mock(self) -> bool:
        return self.model_client is None

    async def generate(self, prompt_text: Optional[str]) -> ResponseEnvelope:
        """
        Produce an itinerary envelope for a free-text travel request.

        Returns a failure envelope only for a too-short prompt or an
        unexpected internal fault; upstream failures fall back to mock data.
        """
        start_time = time.monotonic()

        try:
            prompt = TravelRequest(promptText=prompt_text or "").trimmed()

            if len(prompt) < MIN_PROMPT_LENGTH:
                logger.info(f"Rejecting request, prompt length {len(prompt)} < {MIN_PROMPT_LENGTH}")
                return FailureEnvelope(errorMessage=PROMPT_TOO_SHORT, elapsedMillis=_elapsed_ms(start_time))

            logger.info(f"Received request, prompt length: {len(prompt)}")

            if self.model_client is None:
                logger.info("No API key configured, using mock data")
                note = NOTE_NO_KEY
            else:
                envelope = await self._generate_live(prompt, start_time)
                if envelope is not None:
                    return envelope
                note = NOTE_UPSTREAM_UNAVAILABLE

            return await self._generate_mock(prompt, start_time, note)

        except Exception:
            logger.exception("Unexpected error while generating itinerary")
            return FailureEnvelope(errorMessage=GENERIC_FAILURE, elapsedMillis=_elapsed_ms(start_time))

    async def _generate_live(self, prompt: str, start_time: float) -> Optional[SuccessEnvelope]:
        """Try candidates strictly in order; None when none of them answered"""
        for model_id in self.candidate_models:
            outcome = await self.model_client.attempt(
                model_id,
                self.instruction,
                prompt,
                self.attempt_timeout_ms
            )

            if isinstance(outcome, Success):
                cleaned = strip_code_fences(outcome.raw_text)
                if not cleaned:
                    logger.warning(f"Model {model_id} failed: - empty-response")
                    continue
                parsed = schema_validator.parse(cleaned)
                structured = isinstance(parsed, schema_validator.StructuredItinerary)
                if not structured:
                    logger.warning(f"Model {model_id} returned unstructured itinerary: {parsed.reason[:200]}")

                elapsed = _elapsed_ms(start_time)
                logger.info(f"Gemini API successful with {model_id} in {elapsed}ms")
                return SuccessEnvelope(
                    itineraryRawText=cleaned,
                    metadata=EnvelopeMetadata(
                        source="live",
                        modelIdentifier=model_id,
                        elapsedMillis=elapsed,
                        promptLength=len(prompt),
                        structured=structured
                    )
                )

            if isinstance(outcome, FatalFailure):
                logger.error(f"Fatal upstream failure on {model_id}, skipping remaining models: {outcome.message}")
                return None

            if isinstance(outcome, RecoverableFailure):
                logger.warning(f"Model {model_id} failed: {outcome.status_code or '-'} {outcome.message}")
                continue

            raise TypeError(f"Unknown attempt outcome: {outcome!r}")

        logger.warning("All Gemini models failed, using mock data")
        return None

    async def _generate_mock(self, prompt: str, start_time: float, note: str) -> SuccessEnvelope:
        record = self.mock_generator(prompt)
        raw_text = schema_validator.serialize(record)

        await asyncio.sleep(self.mock_delay_ms / 1000)

        elapsed = _elapsed_ms(start_time)
        logger.info(f"Mock data generated in {elapsed}ms ({note})")
        return SuccessEnvelope(
            itineraryRawText=raw_text,
            metadata=EnvelopeMetadata(
                source="mock",
                elapsedMillis=elapsed,
                promptLength=len(prompt),
                note=note
            )
        )


def _elapsed_ms(start_time: float) -> int:
    return int((time.monotonic() - start_time) * 1000)


def get_itinerary_service() -> ItineraryService:
    """Get instance of ItineraryService built from settings, sharing one Gemini client"""
    return ItineraryService(
        model_client=get_model_client(),
        candidate_models=settings.candidate_models,
        attempt_timeout_ms=settings.attempt_timeout_ms,
        mock_delay_ms=settings.mock_delay_ms,
    )
