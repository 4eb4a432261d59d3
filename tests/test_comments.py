"""
Comment endpoint tests — creation under articles and products, cursor
pagination through the HTTP surface, and author-only edit/delete.
"""
import pytest
from httpx import AsyncClient

from tests.helpers import create_article, create_product, login, register, register_and_login


async def _post_comments(client: AsyncClient, url: str, count: int) -> list[int]:
    ids = []
    for i in range(count):
        resp = await client.post(url, json={"content": f"Comment {i}"})
        assert resp.status_code == 201
        ids.append(resp.json()["id"])
    return ids


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_add_comment_to_article(async_client: AsyncClient):
    user = await register_and_login(async_client, "alice")
    article = await create_article(async_client)

    resp = await async_client.post(f"/articles/{article['id']}/comments", json={"content": "Nice"})
    assert resp.status_code == 201
    comment = resp.json()
    assert comment["content"] == "Nice"
    assert comment["user_id"] == user["id"]
    assert comment["article_id"] == article["id"]
    assert comment["product_id"] is None


@pytest.mark.asyncio
async def test_add_comment_to_product(async_client: AsyncClient):
    await register_and_login(async_client, "alice")
    product = await create_product(async_client)

    resp = await async_client.post(f"/products/{product['id']}/comments", json={"content": "Price?"})
    assert resp.status_code == 201
    assert resp.json()["product_id"] == product["id"]
    assert resp.json()["article_id"] is None


@pytest.mark.asyncio
async def test_add_comment_requires_login(async_client: AsyncClient):
    await register_and_login(async_client, "alice")
    article = await create_article(async_client)
    async_client.cookies.clear()

    resp = await async_client.post(f"/articles/{article['id']}/comments", json={"content": "x"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_comment_on_missing_parent(async_client: AsyncClient):
    await register_and_login(async_client, "alice")
    resp = await async_client.post("/articles/99999/comments", json={"content": "Ghost"})
    assert resp.status_code == 404
    resp = await async_client.post("/products/99999/comments", json={"content": "Ghost"})
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_comment_missing_content(async_client: AsyncClient):
    await register_and_login(async_client, "alice")
    article = await create_article(async_client)
    resp = await async_client.post(f"/articles/{article['id']}/comments", json={})
    assert resp.status_code == 400


# ---------------------------------------------------------------------------
# List with cursor
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_cursor_chain_visits_every_comment_once(async_client: AsyncClient):
    await register_and_login(async_client, "alice")
    article = await create_article(async_client)
    url = f"/articles/{article['id']}/comments"
    created = await _post_comments(async_client, url, 25)

    seen: list[int] = []
    page_sizes: list[int] = []
    cursor = None
    while True:
        params = {"limit": 10}
        if cursor is not None:
            params["cursor"] = cursor
        resp = await async_client.get(url, params=params)
        assert resp.status_code == 200
        data = resp.json()
        page_sizes.append(len(data["items"]))
        seen.extend(c["id"] for c in data["items"])
        cursor = data["next_cursor"]
        if cursor is None:
            break

    assert page_sizes == [10, 10, 5]
    assert seen == sorted(created, reverse=True)


@pytest.mark.asyncio
async def test_exact_multiple_of_limit_ends_with_null_cursor(async_client: AsyncClient):
    await register_and_login(async_client, "alice")
    product = await create_product(async_client)
    url = f"/products/{product['id']}/comments"
    await _post_comments(async_client, url, 4)

    first = (await async_client.get(url, params={"limit": 2})).json()
    assert first["next_cursor"] is not None
    second = (await async_client.get(url, params={"limit": 2, "cursor": first["next_cursor"]})).json()
    assert len(second["items"]) == 2
    assert second["next_cursor"] is None


@pytest.mark.asyncio
async def test_cursor_survives_deletion_of_its_comment(async_client: AsyncClient):
    await register_and_login(async_client, "alice")
    article = await create_article(async_client)
    url = f"/articles/{article['id']}/comments"
    created = await _post_comments(async_client, url, 6)

    first = (await async_client.get(url, params={"limit": 2})).json()
    cursor = first["next_cursor"]
    assert (await async_client.delete(f"/comments/{cursor}")).status_code == 204

    second = (await async_client.get(url, params={"limit": 2, "cursor": cursor})).json()
    assert [c["id"] for c in second["items"]] == sorted(created, reverse=True)[2:4]
    assert second["next_cursor"] is not None


@pytest.mark.asyncio
async def test_comment_list_is_scoped_to_parent(async_client: AsyncClient):
    await register_and_login(async_client, "alice")
    one = await create_article(async_client, "One")
    two = await create_article(async_client, "Two")
    await _post_comments(async_client, f"/articles/{one['id']}/comments", 3)
    await _post_comments(async_client, f"/articles/{two['id']}/comments", 2)

    data = (await async_client.get(f"/articles/{two['id']}/comments")).json()
    assert len(data["items"]) == 2
    assert all(c["article_id"] == two["id"] for c in data["items"])
    assert data["next_cursor"] is None


@pytest.mark.asyncio
async def test_comment_list_is_public(async_client: AsyncClient):
    await register_and_login(async_client, "alice")
    article = await create_article(async_client)
    await _post_comments(async_client, f"/articles/{article['id']}/comments", 1)
    async_client.cookies.clear()

    resp = await async_client.get(f"/articles/{article['id']}/comments")
    assert resp.status_code == 200
    assert len(resp.json()["items"]) == 1


@pytest.mark.asyncio
async def test_comment_list_missing_parent(async_client: AsyncClient):
    resp = await async_client.get("/products/12345/comments")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_comment_list_rejects_bad_limit(async_client: AsyncClient):
    await register_and_login(async_client, "alice")
    article = await create_article(async_client)
    resp = await async_client.get(f"/articles/{article['id']}/comments", params={"limit": 0})
    assert resp.status_code == 400


# ---------------------------------------------------------------------------
# Edit / delete
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_only_author_can_edit_or_delete_comment(async_client: AsyncClient):
    await register(async_client, "bob")
    await register_and_login(async_client, "alice")
    article = await create_article(async_client)
    [comment_id] = await _post_comments(async_client, f"/articles/{article['id']}/comments", 1)

    await login(async_client, "bob")
    assert (await async_client.patch(f"/comments/{comment_id}", json={"content": "x"})).status_code == 403
    assert (await async_client.delete(f"/comments/{comment_id}")).status_code == 403

    await login(async_client, "alice")
    resp = await async_client.patch(f"/comments/{comment_id}", json={"content": "Edited"})
    assert resp.status_code == 200
    assert resp.json()["content"] == "Edited"
    assert (await async_client.delete(f"/comments/{comment_id}")).status_code == 204

    data = (await async_client.get(f"/articles/{article['id']}/comments")).json()
    assert data["items"] == []


@pytest.mark.asyncio
async def test_edit_missing_comment_is_404(async_client: AsyncClient):
    await register_and_login(async_client, "alice")
    assert (await async_client.patch("/comments/555", json={"content": "x"})).status_code == 404
    assert (await async_client.delete("/comments/555")).status_code == 404


@pytest.mark.asyncio
async def test_deleting_article_removes_its_comments(async_client: AsyncClient):
    await register_and_login(async_client, "alice")
    article = await create_article(async_client)
    [comment_id] = await _post_comments(async_client, f"/articles/{article['id']}/comments", 1)

    assert (await async_client.delete(f"/articles/{article['id']}")).status_code == 204
    assert (await async_client.delete(f"/comments/{comment_id}")).status_code == 404
