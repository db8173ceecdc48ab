from __future__ import annotations

import logging
from dataclasses import dataclass, field

from app.core.exceptions import (
    GenerationUnavailableError,
    QuotaExceededError,
    RateLimitedError,
    TripPlannerError,
)
from app.core.itinerary_parser import parse_itinerary
from app.core.itinerary_planner import build_itinerary_prompt, derive_plan_parameters
from app.core.llm_provider import (
    QUOTA_EXCEEDED,
    RATE_LIMITED,
    LLMProvider,
    LLMRequestError,
)
from app.core.repository import MongoDBRepo
from app.core.schemas import Itinerary, Trip, TripRequest

logger = logging.getLogger(__name__)

GENERATION_TEMPERATURE = 0.7


@dataclass
class GenerationResult:
    itinerary: Itinerary
    day_count: int
    daily_budget: int
    warnings: list[str] = field(default_factory=list)


def _map_provider_error(exc: LLMRequestError) -> TripPlannerError:
    if exc.kind == RATE_LIMITED:
        return RateLimitedError()
    if exc.kind == QUOTA_EXCEEDED:
        return QuotaExceededError()
    return GenerationUnavailableError(details={"upstream_status": exc.status_code})


class ItineraryGenerator:
    """Builds the prompt for a trip, calls the model and validates the answer."""

    def __init__(self, provider: LLMProvider, repository: MongoDBRepo | None = None):
        self.provider = provider
        self.repository = repository

    def generate(self, trip: TripRequest) -> GenerationResult:
        """
        Produce a validated itinerary without persisting it.

        Raises:
            InvalidTripInputError: Before any model call, for bad trip parameters.
            RateLimitedError, QuotaExceededError, GenerationUnavailableError:
                When the backend refuses or fails the request. Not retried.
            ItineraryParseError, ItineraryValidationError: When the answer
                cannot be turned into an itinerary.
        """
        params = derive_plan_parameters(trip)
        messages = build_itinerary_prompt(params)

        logger.info(
            f"[Generator] Requesting {params.day_count}-day plan for '{params.destination}' "
            f"({params.season}, daily budget {params.daily_budget})"
        )

        try:
            raw = self.provider.chat(messages, temperature=GENERATION_TEMPERATURE)
        except LLMRequestError as exc:
            raise _map_provider_error(exc) from exc

        try:
            parsed = parse_itinerary(raw, expected_days=params.day_count)
        except TripPlannerError as exc:
            logger.error(f"[Generator] Rejected model output ({exc.error_code.value}): {raw[:500]!r}")
            raise

        logger.info(
            f"[Generator] Itinerary generated for '{params.destination}' "
            f"with {len(parsed.itinerary.days)} days"
        )
        return GenerationResult(
            itinerary=parsed.itinerary,
            day_count=params.day_count,
            daily_budget=params.daily_budget,
            warnings=parsed.warnings,
        )

    def generate_for_trip(self, trip: Trip) -> GenerationResult:
        """
        Generate and store the itinerary for a trip, replacing any previous one.

        Nothing is written unless generation and validation both succeed. The
        trip itself is left untouched on failure.
        """
        if self.repository is None:
            raise RuntimeError("ItineraryGenerator needs a repository to persist itineraries")

        result = self.generate(trip.to_request())
        self.repository.replace_itinerary(trip.id, trip.user_id, result.itinerary)
        logger.info(f"[Generator] Stored itinerary for trip {trip.id}")
        return result
