import pytest
from httpx import AsyncClient

from core.security import create_access_token
from models.sos_request import SOSStatus, SOSType
from models.user import UserRole

SOS_PAYLOAD = {
    "type": "rescue",
    "location": {"lat": 6.9271, "lng": 79.8612, "address": "Wellampitiya"},
    "description": "Elderly couple stranded",
}


@pytest.mark.asyncio
async def test_create_sos_starts_pending(client: AsyncClient, auth_headers, test_user):
    response = await client.post("/api/sos", json=SOS_PAYLOAD, headers=auth_headers)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    data = body["data"]
    assert data["status"] == "pending"
    assert data["userId"] == test_user.id
    assert data["user"]["name"] == test_user.name
    assert "assignedVolunteer" not in data


@pytest.mark.asyncio
async def test_create_sos_requires_auth(client: AsyncClient):
    response = await client.post("/api/sos", json=SOS_PAYLOAD)

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Not authorized, no token"}


@pytest.mark.asyncio
async def test_create_sos_rejects_unknown_type(client: AsyncClient, auth_headers):
    response = await client.post("/api/sos", json={**SOS_PAYLOAD, "type": "pizza"}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_admin_accepts_pending_request(client: AsyncClient, admin_auth_headers, admin_user, test_user, make_sos):
    sos = await make_sos(test_user)

    response = await client.put(f"/api/sos/{sos.id}/accept", headers=admin_auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "SOS request accepted"
    assert body["data"]["status"] == "accepted"
    assert body["data"]["assignedVolunteerId"] == admin_user.id
    assert body["data"]["assignedVolunteer"]["id"] == admin_user.id


@pytest.mark.asyncio
async def test_second_accept_is_rejected_and_state_unchanged(
        client: AsyncClient, admin_auth_headers, admin_user, test_user, make_user, make_sos
):
    sos = await make_sos(test_user)
    await client.put(f"/api/sos/{sos.id}/accept", headers=admin_auth_headers)

    second_admin = await make_user(role=UserRole.ADMIN)
    second_headers = {"Authorization": f"Bearer {create_access_token(subject=second_admin.id)}"}

    response = await client.put(f"/api/sos/{sos.id}/accept", headers=second_headers)

    assert response.status_code == 409
    assert response.json()["message"] == "This request has already been processed"

    current = await client.get(f"/api/sos/{sos.id}", headers=admin_auth_headers)
    assert current.json()["data"]["status"] == "accepted"
    assert current.json()["data"]["assignedVolunteerId"] == admin_user.id


@pytest.mark.asyncio
async def test_regular_user_cannot_accept(client: AsyncClient, auth_headers, test_user, make_sos):
    sos = await make_sos(test_user)

    response = await client.put(f"/api/sos/{sos.id}/accept", headers=auth_headers)

    assert response.status_code == 403
    assert response.json()["message"] == "Not authorized as admin"


@pytest.mark.asyncio
async def test_accept_missing_request(client: AsyncClient, admin_auth_headers):
    response = await client.put("/api/sos/9999/accept", headers=admin_auth_headers)

    assert response.status_code == 404
    assert response.json()["message"] == "SOS request not found"


@pytest.mark.asyncio
async def test_complete_requires_accepted_state(client: AsyncClient, admin_auth_headers, test_user, make_sos):
    sos = await make_sos(test_user)

    response = await client.put(f"/api/sos/{sos.id}/complete", headers=admin_auth_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Only accepted requests can be marked as completed"


@pytest.mark.asyncio
async def test_assigned_volunteer_completes(client: AsyncClient, test_user, other_user, other_auth_headers, make_sos):
    # volunteer recorded directly; only admins accept through the API
    sos = await make_sos(test_user, status=SOSStatus.ACCEPTED, assigned_volunteer_id=other_user.id)

    response = await client.put(f"/api/sos/{sos.id}/complete", headers=other_auth_headers)

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "completed"
    assert response.json()["data"]["assignedVolunteerId"] == other_user.id


@pytest.mark.asyncio
async def test_owner_who_is_not_volunteer_cannot_complete(
        client: AsyncClient, auth_headers, test_user, admin_user, make_sos
):
    sos = await make_sos(test_user, status=SOSStatus.ACCEPTED, assigned_volunteer_id=admin_user.id)

    response = await client.put(f"/api/sos/{sos.id}/complete", headers=auth_headers)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_completed_is_terminal(client: AsyncClient, admin_auth_headers, test_user, admin_user, make_sos):
    sos = await make_sos(test_user, status=SOSStatus.COMPLETED, assigned_volunteer_id=admin_user.id)

    accept = await client.put(f"/api/sos/{sos.id}/accept", headers=admin_auth_headers)
    complete = await client.put(f"/api/sos/{sos.id}/complete", headers=admin_auth_headers)

    assert accept.status_code == 409
    assert complete.status_code == 400


@pytest.mark.asyncio
async def test_full_lifecycle(client: AsyncClient, auth_headers, admin_auth_headers):
    created = await client.post("/api/sos", json=SOS_PAYLOAD, headers=auth_headers)
    sos_id = created.json()["data"]["id"]

    accepted = await client.put(f"/api/sos/{sos_id}/accept", headers=admin_auth_headers)
    completed = await client.put(f"/api/sos/{sos_id}/complete", headers=admin_auth_headers)

    assert accepted.json()["data"]["status"] == "accepted"
    assert completed.json()["data"]["status"] == "completed"
    assert completed.json()["message"] == "SOS request marked as completed"


@pytest.mark.asyncio
async def test_users_only_list_their_own_requests(
        client: AsyncClient, auth_headers, admin_auth_headers, test_user, other_user, make_sos
):
    own = await make_sos(test_user)
    await make_sos(other_user)

    mine = await client.get("/api/sos", headers=auth_headers)
    everything = await client.get("/api/sos", headers=admin_auth_headers)

    assert mine.json()["count"] == 1
    assert mine.json()["data"][0]["id"] == own.id
    assert everything.json()["count"] == 2


@pytest.mark.asyncio
async def test_list_filters_by_status(client: AsyncClient, admin_auth_headers, test_user, admin_user, make_sos):
    await make_sos(test_user)
    await make_sos(test_user, status=SOSStatus.ACCEPTED, assigned_volunteer_id=admin_user.id)

    response = await client.get("/api/sos", params={"status": "accepted"}, headers=admin_auth_headers)

    assert response.json()["count"] == 1
    assert response.json()["data"][0]["status"] == "accepted"


@pytest.mark.asyncio
async def test_non_owner_cannot_view(client: AsyncClient, other_auth_headers, test_user, make_sos):
    sos = await make_sos(test_user)

    response = await client.get(f"/api/sos/{sos.id}", headers=other_auth_headers)

    assert response.status_code == 403
    assert response.json()["message"] == "Not authorized to view this request"


@pytest.mark.asyncio
async def test_owner_updates_description(client: AsyncClient, auth_headers, test_user, make_sos):
    sos = await make_sos(test_user)

    response = await client.put(
        f"/api/sos/{sos.id}", json={"description": "Now three people"}, headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json()["data"]["description"] == "Now three people"
    assert response.json()["data"]["status"] == "pending"


@pytest.mark.asyncio
async def test_generic_update_cannot_change_lifecycle(client: AsyncClient, admin_auth_headers, test_user, make_sos):
    sos = await make_sos(test_user)

    response = await client.put(
        f"/api/sos/{sos.id}", json={"status": "completed"}, headers=admin_auth_headers
    )

    assert response.status_code == 400
    current = await client.get(f"/api/sos/{sos.id}", headers=admin_auth_headers)
    assert current.json()["data"]["status"] == "pending"


@pytest.mark.asyncio
async def test_non_owner_cannot_update_or_delete(client: AsyncClient, other_auth_headers, test_user, make_sos):
    sos = await make_sos(test_user)

    update = await client.put(f"/api/sos/{sos.id}", json={"description": "x"}, headers=other_auth_headers)
    delete = await client.delete(f"/api/sos/{sos.id}", headers=other_auth_headers)

    assert update.status_code == 403
    assert delete.status_code == 403


@pytest.mark.asyncio
async def test_owner_deletes_in_any_state(client: AsyncClient, auth_headers, test_user, admin_user, make_sos):
    sos = await make_sos(test_user, status=SOSStatus.ACCEPTED, assigned_volunteer_id=admin_user.id)

    response = await client.delete(f"/api/sos/{sos.id}", headers=auth_headers)

    assert response.status_code == 200
    listing = await client.get("/api/sos", headers=auth_headers)
    assert listing.json()["count"] == 0


@pytest.mark.asyncio
async def test_sos_stats(client: AsyncClient, admin_auth_headers, test_user, admin_user, make_sos):
    await make_sos(test_user)
    await make_sos(test_user, type=SOSType.FOOD, status=SOSStatus.ACCEPTED, assigned_volunteer_id=admin_user.id)

    response = await client.get("/api/sos/stats", headers=admin_auth_headers)

    data = response.json()["data"]
    assert data["totalRequests"] == 2
    assert data["pendingRequests"] == 1
    assert data["acceptedRequests"] == 1
    assert data["completedRequests"] == 0
    assert data["todayRequests"] == 2
    assert data["typeCounts"] == {"rescue": 1, "food": 1, "medicine": 0, "evacuation": 0}
