"""Hospital routes — CRUD, counter validation, and both leaderboard views."""

from uuid import uuid4

from trialengage.core.domain_types import Role


async def test_create_coerces_numeric_strings(client, admin_headers):
    res = await client.post("/api/company/acme/hospitals", json={
        "name": "Mayo Clinic", "location": "Rochester, MN",
        "consented_patients": "12", "randomized_patients": "", "consent_rate": "4.5",
    }, headers=admin_headers)
    assert res.status_code == 201
    hospital = res.json()["hospital"]
    assert hospital["consented_patients"] == 12
    assert hospital["randomized_patients"] == 0
    assert hospital["consent_rate"] == 4.5
    assert hospital["principal_investigator"] == ""


async def test_create_requires_name_and_location(client, admin_headers):
    res = await client.post(
        "/api/company/acme/hospitals", json={"name": "Mayo"}, headers=admin_headers,
    )
    assert res.status_code == 400


async def test_negative_counters_rejected(client, admin_headers):
    res = await client.post("/api/company/acme/hospitals", json={
        "name": "Mayo", "location": "MN", "consented_patients": -1,
    }, headers=admin_headers)
    assert res.status_code == 400


async def test_investigators_cannot_write(client, user_headers):
    res = await client.post("/api/company/acme/hospitals", json={
        "name": "Mayo", "location": "MN",
    }, headers=user_headers)
    assert res.status_code == 403


async def test_list_sorted_by_name(client, user_headers, hospitals):
    res = await client.get("/api/company/acme/hospitals", headers=user_headers)
    assert [h["name"] for h in res.json()["hospitals"]] == [
        "Cleveland Clinic", "Johns Hopkins", "Massachusetts General",
    ]


async def test_update_is_partial(client, admin_headers, hospitals):
    target = hospitals[2]
    res = await client.put(
        f"/api/company/acme/hospitals/{target.id}",
        json={"consented_patients": 50}, headers=admin_headers,
    )
    assert res.status_code == 200
    hospital = res.json()["hospital"]
    assert hospital["consented_patients"] == 50
    assert hospital["name"] == "Cleveland Clinic"
    assert hospital["updated_at"] is not None


async def test_delete(client, admin_headers, hospitals):
    target = hospitals[0]
    res = await client.delete(
        f"/api/company/acme/hospitals/{target.id}", headers=admin_headers,
    )
    assert res.status_code == 200
    res = await client.delete(
        f"/api/company/acme/hospitals/{target.id}", headers=admin_headers,
    )
    assert res.status_code == 404


async def test_leaderboard_ranks_and_summary(client, user_headers, hospitals):
    res = await client.get("/api/company/acme/leaderboard", headers=user_headers)
    assert res.status_code == 200
    body = res.json()
    assert [(h["rank"], h["name"]) for h in body["hospitals"]] == [
        (1, "Massachusetts General"), (2, "Johns Hopkins"), (3, "Cleveland Clinic"),
    ]
    assert body["summary"] == {
        "total_consented": 115, "total_randomized": 84, "total_hospitals": 3,
    }


async def test_leaderboard_ties_share_rank(client, admin_headers, user_headers, hospitals):
    await client.put(
        f"/api/company/acme/hospitals/{hospitals[1].id}",
        json={"consented_patients": 45, "randomized_patients": 32},
        headers=admin_headers,
    )
    res = await client.get("/api/company/acme/leaderboard", headers=user_headers)
    assert [(h["rank"], h["name"]) for h in res.json()["hospitals"]] == [
        (1, "Johns Hopkins"), (1, "Massachusetts General"), (3, "Cleveland Clinic"),
    ]


async def test_empty_leaderboard(client, user_headers):
    res = await client.get("/api/company/acme/leaderboard", headers=user_headers)
    assert res.json()["hospitals"] == []
    assert res.json()["summary"]["total_consented"] == 0


async def test_mobile_leaderboard_shape(client, user_headers, hospitals):
    res = await client.get("/api/company/acme/mobile/leaderboard", headers=user_headers)
    body = res.json()
    assert body["total_consented"] == 115
    assert body["total_randomized"] == 84
    assert body["last_updated"]
    assert body["hospitals"][0]["rank"] == 1


async def test_leaderboard_is_tenant_scoped(client, codec, other_company, hospitals):
    token = codec.encode("globex_admin", "globex", Role.ADMIN)
    res = await client.get(
        "/api/company/globex/leaderboard", headers={"Authorization": f"Bearer {token}"},
    )
    assert res.json()["hospitals"] == []


async def test_get_single_hospital(client, user_headers, hospitals):
    target = hospitals[1]
    res = await client.get(
        f"/api/company/acme/hospitals/{target.id}", headers=user_headers,
    )
    assert res.status_code == 200
    assert res.json()["hospital"]["name"] == "Johns Hopkins"


async def test_get_hospital_of_other_tenant_is_404(
    client, codec, other_company, hospitals,
):
    token = codec.encode("globex_admin", "globex", Role.ADMIN)
    res = await client.get(
        f"/api/company/globex/hospitals/{hospitals[0].id}",
        headers={"Authorization": f"Bearer {token}"},
    )
    assert res.status_code == 404


async def test_hospital_rank_includes_totals(client, user_headers, hospitals):
    res = await client.get(
        f"/api/company/acme/leaderboard/hospitals/{hospitals[2].id}",
        headers=user_headers,
    )
    assert res.status_code == 200
    body = res.json()
    assert body["hospital"]["rank"] == 3
    assert body["hospital"]["name"] == "Cleveland Clinic"
    assert body["summary"]["total_hospitals"] == 3


async def test_hospital_rank_unknown_id_is_404(client, user_headers, hospitals):
    res = await client.get(
        f"/api/company/acme/leaderboard/hospitals/{uuid4()}", headers=user_headers,
    )
    assert res.status_code == 404


async def test_my_rank_matches_site_ignoring_case(
    client, test_db, approved_user, user_headers, hospitals,
):
    approved_user.site = "  johns HOPKINS "
    await test_db.commit()
    res = await client.get("/api/company/acme/leaderboard/my-rank", headers=user_headers)
    assert res.status_code == 200
    assert res.json()["hospital"]["name"] == "Johns Hopkins"
    assert res.json()["hospital"]["rank"] == 2


async def test_my_rank_without_matching_site_is_404(client, user_headers, hospitals):
    res = await client.get("/api/company/acme/leaderboard/my-rank", headers=user_headers)
    assert res.status_code == 404


async def test_my_rank_is_for_investigators(client, admin_headers, hospitals):
    res = await client.get("/api/company/acme/leaderboard/my-rank", headers=admin_headers)
    assert res.status_code == 403
