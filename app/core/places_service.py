"""
Google Places API integration for resolving itinerary places to map data.
"""

import logging
import time
from typing import Any

import requests

from app.core.exceptions import EnrichmentUnavailableError
from app.core.schemas import PlaceDetails, PlaceLookup
from app.core.settings import get_settings

logger = logging.getLogger(__name__)

PLACES_API_BASE = "https://maps.googleapis.com/maps/api/place"
REQUEST_TIMEOUT_SECONDS = 10


def unresolved(place: PlaceLookup) -> PlaceDetails:
    """Sentinel record for a place that could not be located (lat=0, lng=0)."""
    return PlaceDetails(
        name=place.name,
        description=place.description,
        day_number=place.day_number,
        lat=0,
        lng=0,
        photo_url=None,
        place_id=None,
    )


def mappable_places(places: list[PlaceDetails]) -> list[PlaceDetails]:
    """Drop unresolved entries before plotting on a map."""
    return [place for place in places if place.is_resolved]


class PlacesService:
    """Service for interacting with Google Places API."""

    def __init__(self, api_key: str, delay_seconds: float = 0.1):
        self.api_key = api_key
        self.delay_seconds = delay_seconds

    def get_place_photo_url(self, photo_reference: str, max_width: int = 400) -> str | None:
        """
        Build a fetchable URL for a Places photo reference.

        Args:
            photo_reference: Reference from a Places search result
            max_width: Maximum width in pixels

        Returns:
            Photo URL, or None when no reference is given
        """
        if not photo_reference:
            return None
        return (
            f"{PLACES_API_BASE}/photo?maxwidth={max_width}"
            f"&photo_reference={photo_reference}&key={self.api_key}"
        )

    def text_search(self, query: str) -> dict[str, Any] | None:
        """
        Run a Text Search and return the first result.

        Returns:
            First result dict, or None when the API reports no match

        Raises:
            requests.RequestException: On network or HTTP errors
        """
        response = requests.get(
            f"{PLACES_API_BASE}/textsearch/json",
            params={"query": query, "key": self.api_key},
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        data = response.json()

        results = data.get("results") or []
        if data.get("status") != "OK" or not results:
            logger.info(f"[Places] No match for '{query}' (status={data.get('status')})")
            return None
        return results[0]

    def resolve_place(self, place: PlaceLookup, destination: str) -> PlaceDetails:
        """Resolve one place. Failures yield the (0, 0) sentinel, never an exception."""
        query = f"{place.name}, {destination}"
        try:
            result = self.text_search(query)
        except Exception as e:
            logger.warning(f"[Places] Lookup failed for '{query}': {e}")
            return unresolved(place)

        if not result:
            return unresolved(place)

        location = (result.get("geometry") or {}).get("location") or {}
        photos = result.get("photos") or []
        photo_reference = photos[0].get("photo_reference") if photos else None

        return PlaceDetails(
            name=place.name,
            description=place.description,
            day_number=place.day_number,
            lat=location.get("lat") or 0,
            lng=location.get("lng") or 0,
            photo_url=self.get_place_photo_url(photo_reference) if photo_reference else None,
            place_id=result.get("place_id"),
        )

    def enrich_places(self, places: list[PlaceLookup], destination: str) -> list[PlaceDetails]:
        """
        Resolve a batch of places in input order, one lookup at a time.

        Args:
            places: Places to look up
            destination: Destination appended to every search query

        Returns:
            One PlaceDetails per input place, in the same order
        """
        if not places:
            return []

        logger.info(f"[Places] Resolving {len(places)} places for '{destination}'")
        details = []
        for index, place in enumerate(places):
            if index > 0 and self.delay_seconds > 0:
                time.sleep(self.delay_seconds)
            details.append(self.resolve_place(place, destination))

        resolved = sum(1 for d in details if d.is_resolved)
        logger.info(f"[Places] Resolved {resolved}/{len(places)} places")
        return details


def get_places_service() -> PlacesService:
    settings = get_settings()
    if not settings.google_places_api_key:
        logger.error("[Places] GOOGLE_PLACES_API_KEY not configured")
        raise EnrichmentUnavailableError()
    return PlacesService(
        api_key=settings.google_places_api_key,
        delay_seconds=settings.places_lookup_delay_seconds,
    )
