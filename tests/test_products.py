"""
Product endpoint tests — CRUD with ownership, validation of price, listing
with search, and the liked-products view.
"""
import pytest
from httpx import AsyncClient

from tests.helpers import create_product, login, register, register_and_login


@pytest.mark.asyncio
async def test_create_and_get_product(async_client: AsyncClient):
    user = await register_and_login(async_client, "seller")
    product = await create_product(async_client, "Road bike", 300000)
    assert product["user_id"] == user["id"]
    assert product["tags"] == ["sports"]
    assert product["images"] == []

    resp = await async_client.get(f"/products/{product['id']}")
    assert resp.status_code == 200
    assert resp.json()["price"] == 300000
    assert resp.json()["is_liked"] is False


@pytest.mark.asyncio
async def test_negative_price_rejected(async_client: AsyncClient):
    await register_and_login(async_client, "seller")
    resp = await async_client.post("/products", json={
        "name": "Free money", "description": "No", "price": -1,
    })
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_product_ownership(async_client: AsyncClient):
    await register(async_client, "buyer")
    await register_and_login(async_client, "seller")
    product = await create_product(async_client)

    await login(async_client, "buyer")
    assert (await async_client.patch(f"/products/{product['id']}", json={"price": 1})).status_code == 403
    assert (await async_client.delete(f"/products/{product['id']}")).status_code == 403

    await login(async_client, "seller")
    resp = await async_client.patch(f"/products/{product['id']}", json={"price": 1, "tags": ["sale"]})
    assert resp.status_code == 200
    assert resp.json()["price"] == 1
    assert resp.json()["tags"] == ["sale"]
    assert resp.json()["name"] == "Used bike"

    assert (await async_client.delete(f"/products/{product['id']}")).status_code == 204
    assert (await async_client.get(f"/products/{product['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_mutating_missing_product_is_404(async_client: AsyncClient):
    await register_and_login(async_client, "seller")
    assert (await async_client.patch("/products/777", json={"price": 5})).status_code == 404
    assert (await async_client.delete("/products/777")).status_code == 404


@pytest.mark.asyncio
async def test_list_products_keyword_matches_description(async_client: AsyncClient):
    await register_and_login(async_client, "seller")
    await async_client.post("/products", json={
        "name": "Lamp", "description": "Vintage brass", "price": 100,
    })
    await async_client.post("/products", json={
        "name": "Chair", "description": "Oak", "price": 100,
    })

    resp = await async_client.get("/products", params={"keyword": "brass"})
    data = resp.json()
    assert data["total"] == 1
    assert data["items"][0]["name"] == "Lamp"


@pytest.mark.asyncio
async def test_list_products_newest_first(async_client: AsyncClient):
    await register_and_login(async_client, "seller")
    for name in ("A", "B", "C"):
        await create_product(async_client, name)

    resp = await async_client.get("/products")
    assert [p["name"] for p in resp.json()["items"]] == ["C", "B", "A"]


@pytest.mark.asyncio
async def test_liked_products(async_client: AsyncClient):
    await register(async_client, "buyer")
    await register_and_login(async_client, "seller")
    first = await create_product(async_client, "First")
    second = await create_product(async_client, "Second")
    await create_product(async_client, "Ignored")

    await login(async_client, "buyer")
    await async_client.post(f"/products/{first['id']}/like")
    await async_client.post(f"/products/{second['id']}/like")

    resp = await async_client.get("/products/liked")
    assert resp.status_code == 200
    assert [p["name"] for p in resp.json()["items"]] == ["Second", "First"]


@pytest.mark.asyncio
async def test_liked_products_requires_login(async_client: AsyncClient):
    resp = await async_client.get("/products/liked")
    assert resp.status_code == 401
