import pytest

from app.core import places_service as places_module
from app.core.settings import Settings


class FakeResponse:
    def __init__(self, payload):
        self.payload = payload

    def raise_for_status(self):
        return None

    def json(self):
        return self.payload


@pytest.fixture
def fake_places_api(monkeypatch):
    queries = []

    def fake_get(url, params=None, timeout=None):
        queries.append(params["query"])
        if params["query"].startswith("Beach 2"):
            raise ConnectionError("lookup failed")
        return FakeResponse(
            {
                "status": "OK",
                "results": [
                    {
                        "geometry": {"location": {"lat": 15.5, "lng": 73.8}},
                        "place_id": f"pid_{len(queries)}",
                        "photos": [{"photo_reference": "ref"}],
                    }
                ],
            }
        )

    monkeypatch.setattr(places_module.requests, "get", fake_get)
    return queries


@pytest.mark.asyncio
async def test_place_details_keep_order_and_length(client, auth_headers, fake_places_api):
    payload = {
        "destination": "Goa",
        "places": [
            {"name": "Beach 1", "description": "North", "dayNumber": 1},
            {"name": "Beach 2", "description": "South", "dayNumber": 1},
            {"name": "Beach 3", "description": "Central", "dayNumber": 2},
        ],
    }

    response = await client.post("/places/details", json=payload, headers=auth_headers)

    assert response.status_code == 200
    places = response.json()["places"]
    assert [p["name"] for p in places] == ["Beach 1", "Beach 2", "Beach 3"]
    assert places[1] == {
        "name": "Beach 2",
        "description": "South",
        "dayNumber": 1,
        "lat": 0,
        "lng": 0,
        "photoUrl": None,
        "placeId": None,
    }
    assert places[0]["placeId"] == "pid_1"
    assert places[2]["photoUrl"].startswith("https://maps.googleapis.com/maps/api/place/photo?maxwidth=400")
    assert fake_places_api == ["Beach 1, Goa", "Beach 2, Goa", "Beach 3, Goa"]


@pytest.mark.asyncio
async def test_empty_place_list(client, auth_headers, fake_places_api):
    response = await client.post("/places/details", json={"destination": "Goa", "places": []}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"places": []}
    assert fake_places_api == []


@pytest.mark.asyncio
async def test_missing_api_key_is_503(client, auth_headers, monkeypatch):
    monkeypatch.setattr(places_module, "get_settings", lambda: Settings(google_places_api_key=""))
    response = await client.post("/places/details", json={"destination": "Goa", "places": []}, headers=auth_headers)
    assert response.status_code == 503
    assert response.json()["code"] == "ENRICHMENT_UNAVAILABLE"


@pytest.mark.asyncio
async def test_trip_places_can_be_limited_to_mappable(client, auth_headers, goa_trip_payload, fake_places_api):
    trip_id = (await client.post("/trips", json=goa_trip_payload, headers=auth_headers)).json()["trip"]["id"]

    everything = await client.get(f"/trips/{trip_id}/places", headers=auth_headers)
    assert everything.status_code == 200
    assert [p["name"] for p in everything.json()["places"]] == [f"Beach {n}" for n in range(1, 6)]

    mappable = await client.get(f"/trips/{trip_id}/places", params={"mappable_only": "true"}, headers=auth_headers)
    assert [p["name"] for p in mappable.json()["places"]] == ["Beach 1", "Beach 3", "Beach 4", "Beach 5"]
    assert [p["dayNumber"] for p in mappable.json()["places"]] == [1, 3, 4, 5]
