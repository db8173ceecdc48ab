from typing import Any

from fastapi import APIRouter, Depends

from app.core.places_service import get_places_service
from app.core.schemas import PlaceDetailsRequest, User
from app.core.security import get_current_user

router = APIRouter(prefix="/places", tags=["places"])


@router.post("/details")
def get_place_details(
    payload: PlaceDetailsRequest,
    current_user: User = Depends(get_current_user),
) -> dict[str, Any]:
    """
    Resolve itinerary places to coordinates and photos.

    The response has one entry per requested place, in request order. Places
    that could not be found come back with ``lat`` and ``lng`` of 0 and no
    photo or place id.
    """
    service = get_places_service()
    details = service.enrich_places(payload.places, payload.destination)
    return {"places": [place.model_dump(by_alias=True) for place in details]}
