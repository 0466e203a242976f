import logging
from dataclasses import dataclass
from typing import Union

from pydantic import ValidationError

from tripgen.models.itinerary import ItineraryRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StructuredItinerary:
    record: ItineraryRecord


@dataclass(frozen=True)
class UnstructuredText:
    """Text that did not decode into an itinerary; shown verbatim by clients"""
    text: str
    reason: str


ParseResult = Union[StructuredItinerary, UnstructuredText]


def parse(raw_text: str) -> ParseResult:
    """
    Strictly decode raw model output into an ItineraryRecord.

    Shape mismatches are reported, never repaired, and never raised.
    """
    try:
        record = ItineraryRecord.model_validate_json(raw_text)
    except ValidationError as e:
        logger.debug(f"Itinerary did not validate: {e.error_count()} error(s)")
        return UnstructuredText(text=raw_text, reason=str(e))
    return StructuredItinerary(record=record)


def serialize(record: ItineraryRecord) -> str:
    """Canonical JSON for a record, using wire field names"""
    return record.model_dump_json(by_alias=True, exclude_none=True, indent=2)
