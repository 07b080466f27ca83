import pytest
from bson import ObjectId
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_root(client: AsyncClient):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "Docbase API is running"}


@pytest.mark.asyncio
async def test_create_demo(client: AsyncClient, test_demo_data: dict, identity_headers: dict):
    """Test creating a demo record stamps identity from headers"""
    response = await client.post("/demos", json=test_demo_data, headers=identity_headers)
    assert response.status_code == 201
    data = response.json()
    assert ObjectId.is_valid(data["id"])
    assert data["name"] == test_demo_data["name"]
    assert data["reference"] == test_demo_data["reference"]
    assert data["meta"]["founder"] == "alice"
    assert data["meta"]["merchant_id"] == "merchant_42"
    assert data["meta"]["namespace"] == "acme-group"
    assert data["meta"]["account_id"] == "acct_001"
    assert data["meta"]["deleted"] is False


@pytest.mark.asyncio
async def test_create_demo_without_identity(client: AsyncClient, test_demo_data: dict):
    response = await client.post("/demos", json=test_demo_data)
    assert response.status_code == 201
    assert response.json()["meta"]["founder"] == ""


@pytest.mark.asyncio
async def test_create_demo_rejects_empty_name(client: AsyncClient):
    response = await client.post("/demos", json={"name": ""})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_get_demo(client: AsyncClient, test_demo_data: dict, identity_headers: dict):
    create_response = await client.post("/demos", json=test_demo_data, headers=identity_headers)
    demo_id = create_response.json()["id"]

    response = await client.get(f"/demos/{demo_id}")
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == demo_id
    assert data["meta"] == create_response.json()["meta"]


@pytest.mark.asyncio
async def test_get_missing_demo(client: AsyncClient):
    response = await client.get(f"/demos/{ObjectId()}")
    assert response.status_code == 404
    assert response.json() == {"detail": "Document not found"}

    response = await client.get("/demos/not-an-id")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_demo(client: AsyncClient, test_demo_data: dict, identity_headers: dict):
    create_response = await client.post("/demos", json=test_demo_data, headers=identity_headers)
    demo_id = create_response.json()["id"]

    headers = {**identity_headers, "X-Operator": "bob"}
    response = await client.put(f"/demos/{demo_id}", json={"desc": "Updated description"}, headers=headers)
    assert response.status_code == 200
    data = response.json()
    assert data["desc"] == "Updated description"
    assert data["name"] == test_demo_data["name"]
    assert data["meta"]["founder"] == "alice"
    assert data["meta"]["updater"] == "bob"


@pytest.mark.asyncio
async def test_update_missing_demo(client: AsyncClient):
    response = await client.put(f"/demos/{ObjectId()}", json={"name": "ghost"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_soft_delete_demo(client: AsyncClient, test_demo_data: dict, identity_headers: dict):
    create_response = await client.post("/demos", json=test_demo_data, headers=identity_headers)
    demo_id = create_response.json()["id"]

    for _ in range(2):
        response = await client.put(f"/demos/{demo_id}/soft-delete", headers=identity_headers)
        assert response.status_code == 200
        assert response.json()["meta"]["deleted"] is True

    # Still stored, but hidden from the default listing
    assert (await client.get(f"/demos/{demo_id}")).status_code == 200
    assert (await client.get("/demos")).json()["total"] == 0
    assert (await client.get("/demos?include_deleted=true")).json()["total"] == 1


@pytest.mark.asyncio
async def test_list_demos(client: AsyncClient, identity_headers: dict):
    for name, reference in [("a", 1), ("b", 2), ("c", 3)]:
        await client.post("/demos", json={"name": name, "reference": reference}, headers=identity_headers)

    response = await client.get("/demos")
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 3
    assert len(data["demos"]) == 3

    response = await client.get("/demos?sort=-reference&limit=2")
    data = response.json()
    assert data["total"] == 3
    assert [d["name"] for d in data["demos"]] == ["c", "b"]

    response = await client.get("/demos?name=b")
    data = response.json()
    assert data["total"] == 1
    assert data["demos"][0]["reference"] == 2


@pytest.mark.asyncio
async def test_delete_demo(client: AsyncClient, test_demo_data: dict):
    create_response = await client.post("/demos", json=test_demo_data)
    demo_id = create_response.json()["id"]

    response = await client.delete(f"/demos/{demo_id}")
    assert response.status_code == 204

    get_response = await client.get(f"/demos/{demo_id}")
    assert get_response.status_code == 404


@pytest.mark.asyncio
async def test_delete_unknown_demo(client: AsyncClient):
    response = await client.delete(f"/demos/{ObjectId()}")
    assert response.status_code == 204


def test_app_debug_follows_settings():
    from docbase.config import get_settings
    from docbase.main import app

    assert app.debug is get_settings().debug
