from functools import lru_cache

from fastapi import Depends, Path, Request

from app.core.exceptions import TripNotFoundError
from app.core.itinerary_generator import ItineraryGenerator
from app.core.llm_provider import LLMProvider
from app.core.repository import MongoDBRepo
from app.core.schemas import Trip, User
from app.core.security import get_current_user
from app.core.settings import get_settings


def get_repo(request: Request) -> MongoDBRepo:
    # Connect on first use so importing the app does not require a database
    if request.app.state.repo is None:
        request.app.state.repo = MongoDBRepo()
    return request.app.state.repo


@lru_cache(maxsize=1)
def get_llm_provider() -> LLMProvider:
    return LLMProvider(model=get_settings().aisuite_model)


def get_itinerary_generator(
    repo: MongoDBRepo = Depends(get_repo),
    provider: LLMProvider = Depends(get_llm_provider),
) -> ItineraryGenerator:
    return ItineraryGenerator(provider=provider, repository=repo)


def get_owned_trip(
    trip_id: str = Path(
        ...,
        min_length=1,
        max_length=50,
        pattern="^[a-zA-Z0-9_-]+$",
        description="Trip ID",
    ),
    current_user: User = Depends(get_current_user),
    repo: MongoDBRepo = Depends(get_repo),
) -> Trip:
    """Load a trip belonging to the caller; other users' trips look missing."""
    trip = repo.get_trip(trip_id, current_user.id)
    if trip is None:
        raise TripNotFoundError()
    return trip
