"""
Deterministic stand-in itineraries used when no Gemini model can answer.
"""

from typing import List, Tuple, Dict, Any

from tripgen.models.itinerary import ItineraryRecord, DayPlan


# Checked in order; the first rule with a matching keyword wins
DESTINATION_RULES: List[Tuple[Tuple[str, ...], Dict[str, Any]]] = [
    (("kyoto", "japan"), {
        "destination": "Kyoto, Japan",
        "highlights": ["Kinkaku-ji Temple", "Fushimi Inari Shrine", "Arashiyama"],
        "localCuisine": ["Matcha desserts", "Kaiseki", "Sushi"],
    }),
    (("paris", "france"), {
        "destination": "Paris, France",
        "highlights": ["Eiffel Tower", "Louvre", "Notre-Dame"],
        "localCuisine": ["Croissants", "Escargot", "Wine"],
    }),
    (("bali",), {
        "destination": "Bali, Indonesia",
        "highlights": ["Rice Terraces", "Beaches", "Temples"],
        "localCuisine": ["Nasi Goreng", "Satay", "Fresh fruit"],
    }),
]


def _generic_template(prompt: str) -> Dict[str, Any]:
    return {
        "destination": "Custom Destination",
        "duration": "3 days",
        "budgetLevel": "Mid-range",
        "bestSeason": "Spring/Fall",
        "estimatedCost": "$800-$1200",
        "highlights": ["Local attractions", "Cultural experiences"],
        "dayPlans": [
            DayPlan(
                day=1,
                theme="Arrival & Exploration",
                morning="Check into accommodation",
                afternoon="Explore local area",
                evening="Welcome dinner",
                accommodation="Hotel in city center",
            ),
            DayPlan(
                day=2,
                theme="Main Attractions",
                morning="Visit top attractions",
                afternoon="Cultural experience",
                evening="Local cuisine",
                accommodation="Hotel in city center",
            ),
        ],
        "packingTips": ["Comfortable shoes", "Weather-appropriate clothing"],
        "localCuisine": ["Local specialty 1", "Local specialty 2"],
        "safetyNotes": ["Keep valuables secure"],
        "generatedFor": prompt,
    }


def match_destination_rule(prompt: str) -> Dict[str, Any]:
    """Overrides from the first rule whose keyword appears in the prompt, else {}"""
    prompt_lower = prompt.lower()
    for keywords, overrides in DESTINATION_RULES:
        if any(keyword in prompt_lower for keyword in keywords):
            return overrides
    return {}


def create_mock_itinerary(prompt: str) -> ItineraryRecord:
    fields = _generic_template(prompt)
    fields.update(match_destination_rule(prompt))
    return ItineraryRecord(**fields)
