"""
Quick check of the Google Places lookup used for itinerary maps.

Usage:
    GOOGLE_PLACES_API_KEY=... python scripts/check_places_api.py [destination]
"""

import os
import sys

# Add parent directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.core.places_service import get_places_service, mappable_places
from app.core.schemas import PlaceLookup


def check_places_api(destination: str = "Jaipur"):
    """Resolve a few well-known places and one that should not exist."""
    service = get_places_service()
    print(f"API Key configured: {service.api_key[:6]}...")

    places = [
        PlaceLookup(name="Hawa Mahal", description="Palace of Winds", day_number=1),
        PlaceLookup(name="Amber Fort", description="Hilltop fort", day_number=1),
        PlaceLookup(name="Definitely Not A Real Place 12345", description="Miss", day_number=2),
    ]

    print(f"\n--- Resolving {len(places)} places in {destination} ---")
    details = service.enrich_places(places, destination)
    for place in details:
        status = "resolved" if place.is_resolved else "location unavailable"
        print(f"Day {place.day_number}: {place.name} -> ({place.lat}, {place.lng}) [{status}]")
        if place.photo_url:
            print(f"   Photo URL: {place.photo_url[:80]}...")

    print(f"\n{len(mappable_places(details))}/{len(details)} places can be shown on the map")
    print("\n✅ Done!")


if __name__ == "__main__":
    check_places_api(*sys.argv[1:2])
