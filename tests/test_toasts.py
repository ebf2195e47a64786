import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_list_toasts_empty(client: AsyncClient):
    """Empty list when nobody toasted anybody yet"""
    response = await client.get("/api/toasts")
    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_send_toast(client: AsyncClient, test_user, other_user):
    payload = {
        "toastID": "t-send",
        "toasterID": test_user.user_id,
        "toastieID": other_user.user_id,
    }
    response = await client.post("/api/toasts", json=payload)

    assert response.status_code == 201
    data = response.json()
    assert data["toastID"] == "t-send"
    assert data["toasterID"] == test_user.user_id
    assert data["toastieID"] == other_user.user_id
    # Filled in by the database default
    assert data["toastTime"]


@pytest.mark.asyncio
async def test_send_toast_generates_id(client: AsyncClient, test_user, other_user):
    payload = {"toasterID": test_user.user_id, "toastieID": other_user.user_id}
    response = await client.post("/api/toasts", json=payload)

    assert response.status_code == 201
    assert len(response.json()["toastID"]) == 36


@pytest.mark.asyncio
async def test_send_toast_unknown_user(client: AsyncClient, test_user):
    payload = {"toasterID": test_user.user_id, "toastieID": "ghost"}
    response = await client.post("/api/toasts", json=payload)

    assert response.status_code == 404
    assert "ghost" in response.json()["detail"]


@pytest.mark.asyncio
async def test_send_toast_to_yourself(client: AsyncClient, test_user):
    payload = {"toasterID": test_user.user_id, "toastieID": test_user.user_id}
    response = await client.post("/api/toasts", json=payload)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_send_toast_duplicate_id(client: AsyncClient, test_user, other_user):
    payload = {
        "toastID": "t-dup",
        "toasterID": test_user.user_id,
        "toastieID": other_user.user_id,
    }
    await client.post("/api/toasts", json=payload)
    response = await client.post("/api/toasts", json=payload)

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_send_toast_missing_fields(client: AsyncClient):
    response = await client.post("/api/toasts", json={"toastID": "t-x"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_user_toasts_sent_and_received(
    client: AsyncClient, test_user, other_user
):
    await client.post(
        "/api/toasts",
        json={"toastID": "t-1", "toasterID": test_user.user_id, "toastieID": other_user.user_id},
    )
    await client.post(
        "/api/toasts",
        json={"toastID": "t-2", "toasterID": other_user.user_id, "toastieID": test_user.user_id},
    )

    response = await client.get(f"/api/toasts/user/{test_user.user_id}")
    assert response.status_code == 200
    data = response.json()
    assert [t["toastID"] for t in data["sent"]] == ["t-1"]
    assert [t["toastID"] for t in data["received"]] == ["t-2"]


@pytest.mark.asyncio
async def test_my_toasts_end_to_end(client: AsyncClient):
    """u1 toasts u2 once: one sent toast (to Bob), nothing received"""
    await client.post("/api/users", json={"userID": "u1", "name": "Alice"})
    await client.post("/api/users", json={"userID": "u2", "name": "Bob"})
    response = await client.post(
        "/api/toasts", json={"toastID": "t1", "toasterID": "u1", "toastieID": "u2"}
    )
    assert response.status_code == 201

    response = await client.get("/api/toasts/my-toasts/u1")
    assert response.status_code == 200
    data = response.json()

    assert data["userID"] == "u1"
    assert data["sentCount"] == 1
    assert data["receivedCount"] == 0
    assert data["received"] == []
    assert data["sent"][0]["toastID"] == "t1"
    assert data["sent"][0]["toastieID"] == "u2"
    assert data["sent"][0]["toastieName"] == "Bob"

    # And the other side of the same toast
    data = (await client.get("/api/toasts/my-toasts/u2")).json()
    assert data["sentCount"] == 0
    assert data["receivedCount"] == 1
    assert data["received"][0]["toasterName"] == "Alice"


@pytest.mark.asyncio
async def test_my_toasts_unknown_user(client: AsyncClient):
    response = await client.get("/api/toasts/my-toasts/nobody")
    assert response.status_code == 404
