from typing import Any

from fastapi import APIRouter, Depends

from app.api.deps import get_repo
from app.core.cover_image_service import get_cover_image
from app.core.exceptions import TripNotFoundError
from app.core.repository import MongoDBRepo
from app.core.schemas import PublicTrip

router = APIRouter(prefix="/share", tags=["share"])


@router.get("/{share_token}")
def get_shared_trip(
    share_token: str,
    repo: MongoDBRepo = Depends(get_repo),
) -> dict[str, Any]:
    """
    Public read-only view of a shared trip.

    Unknown, revoked and malformed tokens all get the same 404.
    """
    trip = repo.get_shared_trip(share_token)
    if trip is None:
        raise TripNotFoundError()

    itinerary = repo.get_itinerary(trip.id)
    public = PublicTrip(
        title=trip.title,
        destination=trip.destination,
        start_date=trip.start_date,
        end_date=trip.end_date,
        budget=trip.budget,
        travel_style=trip.travel_style,
        pace=trip.pace,
        status=trip.status,
        display_image=get_cover_image(trip.destination, trip.cover_image),
    )
    return {
        "trip": public.model_dump(mode="json"),
        "itinerary": itinerary.to_document() if itinerary else None,
    }
