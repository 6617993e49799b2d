"""Company routes — dashboard, settings, user approval and usage tracking."""

from sqlalchemy import select

from trialengage.core.domain_types import Role
from trialengage.models.news import News
from trialengage.models.user import User


async def test_unknown_company_is_404(client, admin_headers):
    res = await client.get("/api/company/nope/dashboard", headers=admin_headers)
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_dashboard_requires_token(client, company):
    res = await client.get("/api/company/acme/dashboard")
    assert res.status_code == 401


async def test_dashboard_rejects_investigators(client, user_headers):
    res = await client.get("/api/company/acme/dashboard", headers=user_headers)
    assert res.status_code == 403


async def test_dashboard_rejects_other_tenant_admin(client, codec, company, other_company):
    token = codec.encode("globex_admin", "globex", Role.ADMIN)
    res = await client.get(
        "/api/company/acme/dashboard", headers={"Authorization": f"Bearer {token}"},
    )
    assert res.status_code == 403


async def test_dashboard_stats(client, admin_headers, approved_user, pending_user, test_db):
    test_db.add(News(company_id="acme", title="T", content="C", published=True))
    await test_db.commit()

    res = await client.get("/api/company/acme/dashboard", headers=admin_headers)
    assert res.status_code == 200
    body = res.json()
    assert body["company"]["id"] == "acme"
    assert body["stats"] == {
        "total_users": 2, "pending_approvals": 1, "active_users": 1, "news_items": 1,
    }
    assert len(body["users"]) == 2
    assert len(body["news"]) == 1


async def test_settings_merge(client, admin_headers, user_headers):
    res = await client.put(
        "/api/company/acme/settings",
        json={"settings": {"auto_approval": True, "theme": "dark"}},
        headers=admin_headers,
    )
    assert res.status_code == 200
    assert res.json()["settings"] == {
        "notifications": True, "auto_approval": True, "theme": "dark",
    }

    res = await client.get("/api/company/acme/settings", headers=user_headers)
    assert res.json()["settings"]["theme"] == "dark"


async def test_settings_update_is_admin_only(client, user_headers):
    res = await client.put(
        "/api/company/acme/settings",
        json={"settings": {"auto_approval": True}},
        headers=user_headers,
    )
    assert res.status_code == 403


async def test_list_users_filters_by_status(client, admin_headers, approved_user, pending_user):
    res = await client.get("/api/company/acme/users?status=pending", headers=admin_headers)
    assert res.status_code == 200
    assert [u["email"] for u in res.json()["users"]] == ["pat@acme.org"]


async def test_list_users_rejects_unknown_status(client, admin_headers):
    res = await client.get("/api/company/acme/users?status=banana", headers=admin_headers)
    assert res.status_code == 400


async def test_approve_user_notifies(client, admin_headers, pending_user, notifier):
    res = await client.post(
        f"/api/company/acme/users/{pending_user.id}/approve", headers=admin_headers,
    )
    assert res.status_code == 200
    user = res.json()["user"]
    assert user["status"] == "approved"
    assert user["approved_at"] is not None
    assert notifier.sent == [{"kind": "approval", "email": "pat@acme.org"}]


async def test_approve_user_of_other_tenant_is_404(client, codec, other_company, pending_user):
    token = codec.encode("globex_admin", "globex", Role.ADMIN)
    res = await client.post(
        f"/api/company/globex/users/{pending_user.id}/approve",
        headers={"Authorization": f"Bearer {token}"},
    )
    assert res.status_code == 404


async def test_reject_user(client, admin_headers, pending_user):
    res = await client.post(
        f"/api/company/acme/users/{pending_user.id}/reject", headers=admin_headers,
    )
    assert res.json()["user"]["status"] == "rejected"


async def test_delete_user_deactivates(client, admin_headers, approved_user, test_db):
    res = await client.delete(
        f"/api/company/acme/users/{approved_user.id}", headers=admin_headers,
    )
    assert res.status_code == 200

    row = (await test_db.execute(
        select(User).where(User.id == approved_user.id).execution_options(populate_existing=True),
    )).scalar_one()
    assert row.status == "deactivated"


async def test_deactivated_user_loses_access(client, admin_headers, user_headers, approved_user):
    await client.delete(f"/api/company/acme/users/{approved_user.id}", headers=admin_headers)
    res = await client.get("/api/company/acme/news", headers=user_headers)
    assert res.status_code == 403


async def test_track_app_open_and_tab_view(client, user_headers):
    res = await client.post(
        "/api/company/acme/analytics/track", json={"event": "app_open"}, headers=user_headers,
    )
    assert res.status_code == 200
    assert res.json()["analytics"]["total_app_opens"] == 1

    res = await client.post(
        "/api/company/acme/analytics/track",
        json={"event": "tab_view", "tab": "leaderboard"},
        headers=user_headers,
    )
    analytics = res.json()["analytics"]
    assert analytics["tab_views"]["leaderboard"] == 1
    assert analytics["total_app_opens"] == 1


async def test_tab_view_requires_tab(client, user_headers):
    res = await client.post(
        "/api/company/acme/analytics/track", json={"event": "tab_view"}, headers=user_headers,
    )
    assert res.status_code == 400


async def test_admins_cannot_track(client, admin_headers):
    res = await client.post(
        "/api/company/acme/analytics/track", json={"event": "app_open"}, headers=admin_headers,
    )
    assert res.status_code == 403


async def test_analytics_summary(client, admin_headers, user_headers):
    for event in ({"event": "app_open"}, {"event": "tab_view", "tab": "news"}):
        await client.post("/api/company/acme/analytics/track", json=event, headers=user_headers)

    res = await client.get("/api/company/acme/analytics/summary", headers=admin_headers)
    assert res.status_code == 200
    summary = res.json()["analytics"]
    assert summary["tracked_users"] == 1
    assert summary["total_app_opens"] == 1
    assert summary["tab_views"]["news"] == 1
