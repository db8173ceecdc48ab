import logging
from typing import Any

from fastapi import APIRouter, Depends

from app.api.deps import get_itinerary_generator
from app.core.itinerary_generator import ItineraryGenerator
from app.core.schemas import TripRequest, User
from app.core.security import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/itineraries", tags=["itineraries"])


@router.post("/generate")
def generate_itinerary(
    payload: TripRequest,
    generator: ItineraryGenerator = Depends(get_itinerary_generator),
    current_user: User = Depends(get_current_user),
) -> dict[str, Any]:
    """
    Generate an itinerary from trip parameters without storing it.

    Errors come back as ``{"error": ...}`` with 400 for bad input, 429 when
    rate limited, 402 when the AI quota is exhausted, 502 when the answer
    could not be interpreted and 503 when the backend is unavailable.
    """
    result = generator.generate(payload)
    return {
        "itinerary": result.itinerary.to_document(),
        "dayCount": result.day_count,
        "dailyBudget": result.daily_budget,
        "warnings": result.warnings,
    }
