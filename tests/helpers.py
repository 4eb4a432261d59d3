"""HTTP helpers shared by the endpoint tests."""
from httpx import AsyncClient

PASSWORD = "password1234"


async def register(client: AsyncClient, name: str, password: str = PASSWORD) -> dict:
    """Register ``<name>@example.com`` with nickname *name* and return the user body."""
    resp = await client.post("/auth/register", json={
        "email": f"{name}@example.com",
        "nickname": name,
        "password": password,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


async def login(client: AsyncClient, name: str, password: str = PASSWORD) -> dict:
    """Log in as *name*; the client's cookie jar now carries that session."""
    resp = await client.post("/auth/login", json={
        "email": f"{name}@example.com",
        "password": password,
    })
    assert resp.status_code == 200, resp.text
    return resp.json()


async def register_and_login(client: AsyncClient, name: str) -> dict:
    await register(client, name)
    return await login(client, name)


async def create_article(client: AsyncClient, title: str = "Selling tips") -> dict:
    resp = await client.post("/articles", json={"title": title, "content": "Body text"})
    assert resp.status_code == 201, resp.text
    return resp.json()


async def create_product(client: AsyncClient, name: str = "Used bike", price: int = 150000) -> dict:
    resp = await client.post("/products", json={
        "name": name,
        "description": "Barely ridden",
        "price": price,
        "tags": ["sports"],
    })
    assert resp.status_code == 201, resp.text
    return resp.json()
