"""
Cover image selection for trips without an uploaded cover.
"""

UNSPLASH_BASE = "https://images.unsplash.com"

DESTINATION_IMAGES = {
    "goa": "photo-1512343879784-a960bf40e7f2",
    "jaipur": "photo-1477587458883-47145ed94245",
    "kerala": "photo-1602216056096-3b40cc0c9944",
    "manali": "photo-1626621341517-bbf3d9990a23",
    "mumbai": "photo-1570168007204-dfb528c6958f",
    "delhi": "photo-1587474260584-136574528ed5",
    "agra": "photo-1564507592333-c60657eea523",
    "udaipur": "photo-1568495248636-6432b97bd949",
    "varanasi": "photo-1561361513-2d000a50f0dc",
}
DEFAULT_IMAGE = "photo-1524492412937-b28074a5d7da"


def _image_url(photo_id: str) -> str:
    return f"{UNSPLASH_BASE}/{photo_id}?w=400&h=300&fit=crop"


def get_cover_image(destination: str, cover_image: str | None = None) -> str:
    """
    Pick the image shown for a trip.

    Args:
        destination: Free-text destination (e.g., "North Goa")
        cover_image: Image URL stored on the trip, preferred when set

    Returns:
        Image URL; a destination match from the built-in table, else a generic India image
    """
    if cover_image:
        return cover_image

    key = (destination or "").lower()
    for city, photo_id in DESTINATION_IMAGES.items():
        if city in key:
            return _image_url(photo_id)
    return _image_url(DEFAULT_IMAGE)
