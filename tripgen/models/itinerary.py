from pydantic import BaseModel, ConfigDict, Field, AliasChoices, model_validator
from typing import Optional, List, Literal, Union


NOT_APPLICABLE = "N/A"


# ---------------------------
# Core Models
# ---------------------------

class TravelRequest(BaseModel):
    """Incoming free-text travel request"""
    model_config = ConfigDict(frozen=True)

    # "prompt" is the field name older clients send
    promptText: Optional[str] = Field(None, validation_alias=AliasChoices("promptText", "prompt"))

    def trimmed(self) -> str:
        return (self.promptText or "").strip()


class DayPlan(BaseModel):
    # Model output is decoded as-is; "1", true or 1.0 are not day numbers
    model_config = ConfigDict(strict=True)

    day: int = Field(..., ge=1)
    theme: str
    morning: Optional[str] = None
    afternoon: Optional[str] = None
    evening: Optional[str] = None
    accommodation: Optional[str] = None

    def slot(self, name: str) -> Optional[str]:
        """Value of a time slot or accommodation, None when absent or N/A."""
        value = getattr(self, name)
        if value is None or value.strip() == NOT_APPLICABLE:
            return None
        return value


class ItineraryRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, strict=True)

    destination: str
    duration: str
    budgetLevel: Literal["Budget", "Mid-range", "Luxury"]
    bestSeason: str
    estimatedCost: Optional[str] = None
    highlights: List[str] = []
    # The instruction template asks for the day list under "itinerary"
    dayPlans: List[DayPlan] = Field(default_factory=list, alias="itinerary")
    packingTips: List[str] = []
    localCuisine: List[str] = []
    safetyNotes: List[str] = []
    generatedFor: Optional[str] = None

    @model_validator(mode="after")
    def check_day_order(self):
        days = [plan.day for plan in self.dayPlans]
        for previous, current in zip(days, days[1:]):
            if current <= previous:
                raise ValueError(f"Day numbers must be unique and ascending, got {days}")
        return self


# ---------------------------
# Response Envelopes
# ---------------------------

class EnvelopeMetadata(BaseModel):
    source: Literal["live", "mock"]
    modelIdentifier: Optional[str] = None
    elapsedMillis: int
    promptLength: int
    structured: bool = True
    note: Optional[str] = None


class SuccessEnvelope(BaseModel):
    success: Literal[True] = True
    itineraryRawText: str
    metadata: EnvelopeMetadata


class FailureEnvelope(BaseModel):
    success: Literal[False] = False
    errorMessage: str
    elapsedMillis: int


ResponseEnvelope = Union[SuccessEnvelope, FailureEnvelope]
