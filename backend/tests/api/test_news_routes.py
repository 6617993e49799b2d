"""News routes — admin CRUD, published-only visibility for investigators."""

from uuid import uuid4


async def _create(client, headers, **overrides):
    payload = {"title": "Enrollment milestone", "content": "100 patients!", **overrides}
    res = await client.post("/api/company/acme/news", json=payload, headers=headers)
    assert res.status_code == 201
    return res.json()["news"]


async def test_create_defaults_to_unpublished(client, admin_headers):
    news = await _create(client, admin_headers)
    assert news["published"] is False
    assert news["company_id"] == "acme"
    assert news["updated_at"] is None


async def test_create_requires_title_and_content(client, admin_headers):
    res = await client.post(
        "/api/company/acme/news", json={"title": "  "}, headers=admin_headers,
    )
    assert res.status_code == 400


async def test_investigators_cannot_create(client, user_headers):
    res = await client.post(
        "/api/company/acme/news", json={"title": "t", "content": "c"}, headers=user_headers,
    )
    assert res.status_code == 403


async def test_investigators_only_see_published(client, admin_headers, user_headers):
    await _create(client, admin_headers, title="Draft")
    await _create(client, admin_headers, title="Live", published=True)

    res = await client.get("/api/company/acme/news", headers=user_headers)
    assert [n["title"] for n in res.json()["news"]] == ["Live"]

    res = await client.get("/api/company/acme/news", headers=admin_headers)
    assert {n["title"] for n in res.json()["news"]} == {"Draft", "Live"}


async def test_partial_update_stamps_updated_at(client, admin_headers):
    news = await _create(client, admin_headers)
    res = await client.put(
        f"/api/company/acme/news/{news['id']}", json={"published": True},
        headers=admin_headers,
    )
    assert res.status_code == 200
    updated = res.json()["news"]
    assert updated["published"] is True
    assert updated["title"] == news["title"]
    assert updated["updated_at"] is not None


async def test_delete_and_unknown_id(client, admin_headers):
    news = await _create(client, admin_headers)
    res = await client.delete(f"/api/company/acme/news/{news['id']}", headers=admin_headers)
    assert res.status_code == 200
    res = await client.delete(f"/api/company/acme/news/{news['id']}", headers=admin_headers)
    assert res.status_code == 404
    res = await client.put(
        f"/api/company/acme/news/{uuid4()}", json={"title": "x"}, headers=admin_headers,
    )
    assert res.status_code == 404
