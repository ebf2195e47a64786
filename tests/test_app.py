import pytest
from httpx import AsyncClient

from app.core.sample_data import SAMPLE_TOASTS, SAMPLE_USERS


@pytest.mark.asyncio
async def test_root(client: AsyncClient):
    response = await client.get("/")
    assert response.status_code == 200
    assert "Toast App" in response.json()["message"]


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"] == "connected"


@pytest.mark.asyncio
async def test_seed_endpoint_is_idempotent(client: AsyncClient):
    """Seeding twice keeps the same rows (insert-or-ignore)"""
    first = await client.post("/api/seed")
    second = await client.post("/api/seed")

    assert first.status_code == 201
    assert second.status_code == 201
    assert len(second.json()["users"]) == len(SAMPLE_USERS)
    assert len(second.json()["toasts"]) == len(SAMPLE_TOASTS)

    users = (await client.get("/api/users")).json()
    toasts = (await client.get("/api/toasts")).json()
    assert len(users) == len(SAMPLE_USERS)
    assert len(toasts) == len(SAMPLE_TOASTS)


@pytest.mark.asyncio
async def test_clear_endpoint(client: AsyncClient):
    await client.post("/api/seed")

    response = await client.delete("/api/clear")
    assert response.status_code == 200

    assert (await client.get("/api/users")).json() == []
    assert (await client.get("/api/toasts")).json() == []
