import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.api.deps import get_itinerary_generator, get_owned_trip, get_repo
from app.core.cost_reconciliation import reconcile_costs
from app.core.cover_image_service import get_cover_image
from app.core.exceptions import TripNotFoundError, TripPlannerError
from app.core.itinerary_generator import GenerationResult, ItineraryGenerator
from app.core.itinerary_planner import validate_trip_request
from app.core.pdf_export import content_disposition, export_itinerary_pdf
from app.core.places_service import get_places_service, mappable_places
from app.core.repository import MongoDBRepo
from app.core.schemas import (
    Itinerary,
    PlaceLookup,
    ShareStatus,
    ShareToggleRequest,
    Trip,
    TripCreate,
    TripUpdate,
    User,
)
from app.core.security import get_current_user
from app.core.settings import get_settings
from app.core.share_utils import build_share_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trips", tags=["trips"])


def _trip_view(trip: Trip) -> dict[str, Any]:
    view = trip.model_dump(mode="json")
    view["display_image"] = get_cover_image(trip.destination, trip.cover_image)
    view["share_url"] = build_share_url(get_settings().frontend_url, trip.share_token)
    return view


def _generation_view(result: GenerationResult) -> dict[str, Any]:
    return {
        "itinerary": result.itinerary.to_document(),
        "dayCount": result.day_count,
        "dailyBudget": result.daily_budget,
        "warnings": result.warnings,
    }


def _require_itinerary(repo: MongoDBRepo, trip: Trip) -> Itinerary:
    itinerary = repo.get_itinerary(trip.id)
    if itinerary is None:
        raise HTTPException(status_code=404, detail="Itinerary not generated yet")
    return itinerary


@router.post("", status_code=status.HTTP_201_CREATED)
def create_trip(
    payload: TripCreate,
    repo: MongoDBRepo = Depends(get_repo),
    generator: ItineraryGenerator = Depends(get_itinerary_generator),
    current_user: User = Depends(get_current_user),
) -> dict[str, Any]:
    """
    Create a trip and generate its first itinerary.

    If generation fails the trip is kept without an itinerary and the error
    body carries ``trip_id`` so the client can retry through
    ``POST /trips/{trip_id}/itinerary``.
    """
    validate_trip_request(payload)
    trip = repo.create_trip(current_user.id, payload)
    logger.info(f"[Trips] Created trip {trip.id} for user {current_user.id}")

    try:
        result = generator.generate_for_trip(trip)
    except TripPlannerError as exc:
        logger.warning(f"[Trips] Trip {trip.id} kept without itinerary ({exc.error_code.value})")
        exc.details["trip_id"] = trip.id
        raise

    return {"trip": _trip_view(trip), **_generation_view(result)}


@router.get("")
def list_trips(
    repo: MongoDBRepo = Depends(get_repo),
    current_user: User = Depends(get_current_user),
) -> dict[str, Any]:
    return {"trips": [_trip_view(trip) for trip in repo.list_trips(current_user.id)]}


@router.get("/{trip_id}")
def get_trip(
    trip: Trip = Depends(get_owned_trip),
    repo: MongoDBRepo = Depends(get_repo),
) -> dict[str, Any]:
    itinerary = repo.get_itinerary(trip.id)
    return {
        "trip": _trip_view(trip),
        "itinerary": itinerary.to_document() if itinerary else None,
    }


@router.patch("/{trip_id}")
def update_trip(
    payload: TripUpdate,
    trip: Trip = Depends(get_owned_trip),
    repo: MongoDBRepo = Depends(get_repo),
) -> dict[str, Any]:
    updated = repo.update_trip(trip.id, trip.user_id, payload)
    if updated is None:
        raise TripNotFoundError()
    return {"trip": _trip_view(updated)}


@router.delete("/{trip_id}")
def delete_trip(
    trip: Trip = Depends(get_owned_trip),
    repo: MongoDBRepo = Depends(get_repo),
) -> dict[str, str]:
    """Delete a trip along with its itinerary and expenses."""
    if not repo.delete_trip(trip.id, trip.user_id):
        raise TripNotFoundError()
    logger.info(f"[Trips] Deleted trip {trip.id}")
    return {"message": "Trip deleted"}


@router.post("/{trip_id}/itinerary")
def regenerate_itinerary(
    trip: Trip = Depends(get_owned_trip),
    generator: ItineraryGenerator = Depends(get_itinerary_generator),
) -> dict[str, Any]:
    """Generate a new itinerary for the trip, fully replacing the stored one."""
    result = generator.generate_for_trip(trip)
    return _generation_view(result)


@router.get("/{trip_id}/itinerary/costs")
def get_cost_reconciliation(
    trip: Trip = Depends(get_owned_trip),
    repo: MongoDBRepo = Depends(get_repo),
) -> dict[str, Any]:
    """Declared itinerary totals next to the sums of their parts."""
    itinerary = _require_itinerary(repo, trip)
    return reconcile_costs(itinerary).model_dump()


@router.get("/{trip_id}/places")
def get_trip_places(
    mappable_only: bool = Query(False, description="Drop places that could not be located"),
    trip: Trip = Depends(get_owned_trip),
    repo: MongoDBRepo = Depends(get_repo),
) -> dict[str, Any]:
    service = get_places_service()
    itinerary = _require_itinerary(repo, trip)

    lookups = [
        PlaceLookup(name=place.name, description=place.description, day_number=day.day_number)
        for day in itinerary.days
        for place in day.places
    ]
    details = service.enrich_places(lookups, trip.destination)
    if mappable_only:
        details = mappable_places(details)
    return {"places": [place.model_dump(by_alias=True) for place in details]}


@router.get("/{trip_id}/export.pdf")
def export_trip_pdf(
    trip: Trip = Depends(get_owned_trip),
    repo: MongoDBRepo = Depends(get_repo),
) -> Response:
    itinerary = _require_itinerary(repo, trip)
    content = export_itinerary_pdf(trip, itinerary)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": content_disposition(trip.title)},
    )


@router.post("/{trip_id}/share", response_model=ShareStatus)
def toggle_sharing(
    payload: ShareToggleRequest,
    trip: Trip = Depends(get_owned_trip),
    repo: MongoDBRepo = Depends(get_repo),
) -> ShareStatus:
    """
    Turn the public share link on or off.

    Every enable mints a fresh token, so links handed out before a disable
    stop working for good.
    """
    if payload.enabled:
        updated = repo.enable_sharing(trip.id, trip.user_id)
    else:
        updated = repo.disable_sharing(trip.id, trip.user_id)
    if updated is None:
        raise TripNotFoundError()

    logger.info(f"[Share] Sharing {'enabled' if updated.is_shared else 'disabled'} for trip {trip.id}")
    return ShareStatus(
        is_shared=updated.is_shared,
        share_token=updated.share_token,
        share_url=build_share_url(get_settings().frontend_url, updated.share_token),
    )
