import pytest
from httpx import AsyncClient

SHELTER_PAYLOAD = {
    "name": "Kelaniya Temple Hall",
    "capacity": 100,
    "currentOccupancy": 10,
    "location": {"lat": 6.9553, "lng": 79.9220, "address": "Kelaniya"},
    "phone": "+94112911111",
    "facilities": ["water", "food"],
}


@pytest.mark.asyncio
async def test_admin_creates_shelter(client: AsyncClient, admin_auth_headers):
    response = await client.post("/api/shelters", json=SHELTER_PAYLOAD, headers=admin_auth_headers)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["capacity"] == 100
    assert data["currentOccupancy"] == 10
    assert data["isActive"] is True
    assert data["facilities"] == ["water", "food"]


@pytest.mark.asyncio
async def test_create_rejects_occupancy_over_capacity(client: AsyncClient, admin_auth_headers):
    payload = {**SHELTER_PAYLOAD, "currentOccupancy": 101}

    response = await client.post("/api/shelters", json=payload, headers=admin_auth_headers)

    assert response.status_code == 400
    assert "Occupancy cannot exceed shelter capacity" in response.json()["message"]


@pytest.mark.asyncio
async def test_regular_user_cannot_create(client: AsyncClient, auth_headers):
    response = await client.post("/api/shelters", json=SHELTER_PAYLOAD, headers=auth_headers)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_list_is_public_and_sorted_by_name(client: AsyncClient, make_shelter):
    await make_shelter(name="Zahira College")
    await make_shelter(name="Ananda College", is_active=False)

    everything = await client.get("/api/shelters")
    active = await client.get("/api/shelters", params={"isActive": "true"})

    assert [s["name"] for s in everything.json()["data"]] == ["Ananda College", "Zahira College"]
    assert active.json()["count"] == 1
    assert active.json()["data"][0]["name"] == "Zahira College"


@pytest.mark.asyncio
async def test_occupancy_update_within_capacity(client: AsyncClient, admin_auth_headers, make_shelter):
    shelter = await make_shelter(capacity=100, current_occupancy=80)

    response = await client.put(
        f"/api/shelters/{shelter.id}/occupancy", json={"currentOccupancy": 100}, headers=admin_auth_headers
    )

    assert response.status_code == 200
    assert response.json()["message"] == "Occupancy updated successfully"
    assert response.json()["data"]["currentOccupancy"] == 100
    assert response.json()["data"]["capacity"] == 100


@pytest.mark.asyncio
async def test_occupancy_over_capacity_is_rejected(client: AsyncClient, admin_auth_headers, make_shelter):
    shelter = await make_shelter(capacity=100, current_occupancy=80)

    response = await client.put(
        f"/api/shelters/{shelter.id}/occupancy", json={"currentOccupancy": 120}, headers=admin_auth_headers
    )

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Occupancy cannot exceed shelter capacity"}

    current = await client.get(f"/api/shelters/{shelter.id}")
    assert current.json()["data"]["currentOccupancy"] == 80


@pytest.mark.asyncio
async def test_occupancy_for_missing_shelter(client: AsyncClient, admin_auth_headers):
    response = await client.put(
        "/api/shelters/777/occupancy", json={"currentOccupancy": 1}, headers=admin_auth_headers
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Shelter not found"


@pytest.mark.asyncio
async def test_negative_occupancy_is_invalid(client: AsyncClient, admin_auth_headers, make_shelter):
    shelter = await make_shelter()

    response = await client.put(
        f"/api/shelters/{shelter.id}/occupancy", json={"currentOccupancy": -1}, headers=admin_auth_headers
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_checks_merged_capacity(client: AsyncClient, admin_auth_headers, make_shelter):
    shelter = await make_shelter(capacity=100, current_occupancy=80)

    shrink = await client.put(f"/api/shelters/{shelter.id}", json={"capacity": 50}, headers=admin_auth_headers)
    rename = await client.put(f"/api/shelters/{shelter.id}", json={"name": "Renamed"}, headers=admin_auth_headers)

    assert shrink.status_code == 400
    assert rename.status_code == 200
    assert rename.json()["data"]["name"] == "Renamed"
    assert rename.json()["data"]["capacity"] == 100


@pytest.mark.asyncio
async def test_admin_deletes_shelter(client: AsyncClient, admin_auth_headers, make_shelter):
    shelter = await make_shelter()

    response = await client.delete(f"/api/shelters/{shelter.id}", headers=admin_auth_headers)

    assert response.status_code == 200
    assert (await client.get(f"/api/shelters/{shelter.id}")).status_code == 404


@pytest.mark.asyncio
async def test_shelter_stats(client: AsyncClient, auth_headers, make_shelter):
    await make_shelter(capacity=100, current_occupancy=100)
    await make_shelter(capacity=50, current_occupancy=45)
    await make_shelter(capacity=50, current_occupancy=5)
    await make_shelter(capacity=1000, current_occupancy=0, is_active=False)

    response = await client.get("/api/shelters/stats", headers=auth_headers)

    data = response.json()["data"]
    assert data["totalShelters"] == 3
    assert data["totalCapacity"] == 200
    assert data["totalOccupied"] == 150
    assert data["availableSpace"] == 50
    assert data["occupancyRate"] == 75.0
    assert data["fullShelters"] == 1
    assert data["nearlyFullShelters"] == 1


@pytest.mark.asyncio
async def test_shelter_stats_without_capacity(client: AsyncClient, auth_headers):
    response = await client.get("/api/shelters/stats", headers=auth_headers)

    assert response.json()["data"]["occupancyRate"] == 0
    assert response.json()["data"]["totalShelters"] == 0
