import logging

import pytest


async def _create_trip(client, headers, payload):
    response = await client.post("/trips", json=payload, headers=headers)
    assert response.status_code == 201
    return response.json()["trip"]["id"]


@pytest.mark.asyncio
async def test_share_enable_fetch_disable(client, auth_headers, goa_trip_payload):
    trip_id = await _create_trip(client, auth_headers, goa_trip_payload)

    enabled = await client.post(f"/trips/{trip_id}/share", json={"enabled": True}, headers=auth_headers)
    assert enabled.status_code == 200
    status = enabled.json()
    token = status["share_token"]
    assert status["is_shared"] is True
    assert status["share_url"] == f"http://localhost:8080/trip/share/{token}"

    public = await client.get(f"/share/{token}")
    assert public.status_code == 200
    body = public.json()
    assert body["trip"]["destination"] == "Goa"
    assert len(body["itinerary"]["days"]) == 5
    assert "share_token" not in body["trip"]
    assert "user_id" not in body["trip"]

    disabled = await client.post(f"/trips/{trip_id}/share", json={"enabled": False}, headers=auth_headers)
    assert disabled.json() == {"is_shared": False, "share_token": None, "share_url": None}

    stale = await client.get(f"/share/{token}")
    unknown = await client.get("/share/this-token-was-never-issued")
    assert stale.status_code == unknown.status_code == 404
    assert stale.json() == unknown.json() == {"error": "Trip not found", "code": "TRIP_NOT_FOUND"}


@pytest.mark.asyncio
async def test_reenabling_issues_a_new_link(client, auth_headers, goa_trip_payload):
    trip_id = await _create_trip(client, auth_headers, goa_trip_payload)
    share = f"/trips/{trip_id}/share"

    first = (await client.post(share, json={"enabled": True}, headers=auth_headers)).json()["share_token"]
    await client.post(share, json={"enabled": False}, headers=auth_headers)
    second = (await client.post(share, json={"enabled": True}, headers=auth_headers)).json()["share_token"]

    assert first != second
    assert (await client.get(f"/share/{first}")).status_code == 404
    assert (await client.get(f"/share/{second}")).status_code == 200


@pytest.mark.asyncio
async def test_owner_view_reflects_sharing(client, auth_headers, goa_trip_payload):
    trip_id = await _create_trip(client, auth_headers, goa_trip_payload)
    token = (
        await client.post(f"/trips/{trip_id}/share", json={"enabled": True}, headers=auth_headers)
    ).json()["share_token"]

    trip = (await client.get(f"/trips/{trip_id}", headers=auth_headers)).json()["trip"]
    assert trip["is_shared"] is True
    assert trip["share_url"].endswith(f"/trip/share/{token}")


@pytest.mark.asyncio
async def test_only_owner_can_toggle_sharing(client, auth_headers, other_auth_headers, goa_trip_payload):
    trip_id = await _create_trip(client, auth_headers, goa_trip_payload)
    response = await client.post(f"/trips/{trip_id}/share", json={"enabled": True}, headers=other_auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_share_token_is_not_logged(client, auth_headers, goa_trip_payload, caplog):
    trip_id = await _create_trip(client, auth_headers, goa_trip_payload)
    token = (
        await client.post(f"/trips/{trip_id}/share", json={"enabled": True}, headers=auth_headers)
    ).json()["share_token"]
    await client.post(f"/trips/{trip_id}/share", json={"enabled": False}, headers=auth_headers)

    with caplog.at_level(logging.DEBUG):
        await client.get(f"/share/{token}")

    app_messages = [r.getMessage() for r in caplog.records if r.name.startswith("app.")]
    assert any("/share/<token>" in message for message in app_messages)
    assert all(token not in message for message in app_messages)
