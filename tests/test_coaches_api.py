import pytest

ADMIN = "/api/v1/admin"


@pytest.fixture
async def admin(make_user):
    return await make_user("admin@example.com", "admin")


@pytest.fixture
async def customer(make_user):
    return await make_user("customer@example.com")


async def test_coach_me_creates_profile(client, make_user, auth_headers):
    coach = await make_user("coach@example.com", "coach")
    first = await client.get("/api/v1/coach/me", headers=auth_headers(coach))
    assert first.status_code == 200
    assert first.json()["user"]["id"] == str(coach.id)
    assert first.json()["customers"] == []

    second = await client.get("/api/v1/coach/me", headers=auth_headers(coach))
    assert second.json()["id"] == first.json()["id"]


async def test_coach_me_forbidden_for_customers(client, customer, auth_headers):
    resp = await client.get("/api/v1/coach/me", headers=auth_headers(customer))
    assert resp.status_code == 403


async def test_create_coach_grants_role(client, admin, customer, auth_headers):
    headers = auth_headers(admin)
    resp = await client.post(
        f"{ADMIN}/coaches",
        json={"user_id": str(customer.id), "specialties": ["strength"], "bio": "Lifter"},
        headers=headers,
    )
    assert resp.status_code == 201
    assert resp.json()["specialties"] == ["strength"]

    user = await client.get(f"{ADMIN}/users/{customer.id}", headers=headers)
    assert user.json()["roles"] == ["coach", "customer"]
    assert user.json()["role"] == "coach"

    again = await client.post(
        f"{ADMIN}/coaches", json={"user_id": str(customer.id)}, headers=headers
    )
    assert again.status_code == 409


async def test_create_coach_unknown_user(client, admin, auth_headers):
    resp = await client.post(
        f"{ADMIN}/coaches",
        json={"user_id": "00000000-0000-0000-0000-000000000001"},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 404


async def test_manage_customers(client, admin, make_user, auth_headers):
    headers = auth_headers(admin)
    coach_user = await make_user("coach@example.com", "coach")
    c1 = await make_user("c1@example.com")
    c2 = await make_user("c2@example.com")
    coach_only = await make_user("other.coach@example.com", "coach")

    # A user id is accepted and the profile is created
    resp = await client.put(
        f"{ADMIN}/coaches/{coach_user.id}/customers",
        json={"customer_ids": [str(c1.id), str(c1.id)]},
        headers=headers,
    )
    assert resp.status_code == 200
    coach_id = resp.json()["id"]
    assert [c["id"] for c in resp.json()["customers"]] == [str(c1.id)]

    resp = await client.patch(
        f"{ADMIN}/coaches/{coach_id}/customers",
        json={"customer_id": str(c2.id), "action": "add"},
        headers=headers,
    )
    assert {c["id"] for c in resp.json()["customers"]} == {str(c1.id), str(c2.id)}

    resp = await client.patch(
        f"{ADMIN}/coaches/{coach_id}/customers",
        json={"customer_id": str(c1.id), "action": "remove"},
        headers=headers,
    )
    ids = await client.get(f"{ADMIN}/coaches/{coach_id}/customers", headers=headers)
    assert ids.json() == {"customers": [str(c2.id)]}

    resp = await client.patch(
        f"{ADMIN}/coaches/{coach_id}/customers",
        json={"customer_id": str(coach_only.id), "action": "add"},
        headers=headers,
    )
    assert resp.status_code == 400


async def test_replace_customers_requires_coach_role(client, admin, customer, auth_headers):
    resp = await client.put(
        f"{ADMIN}/coaches/{customer.id}/customers",
        json={"customer_ids": []},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 400


async def test_update_and_delete_coach(
    client, admin, make_user, customer, auth_headers, link_customer
):
    headers = auth_headers(admin)
    coach_user = await make_user("coach@example.com", "coach")
    coach = await link_customer(coach_user, customer)

    resp = await client.put(
        f"{ADMIN}/coaches/{coach.id}", json={"bio": "Updated"}, headers=headers
    )
    assert resp.json()["bio"] == "Updated"

    listed = await client.get(f"{ADMIN}/coaches", headers=headers)
    assert [c["id"] for c in listed.json()] == [str(coach.id)]

    assert (await client.delete(f"{ADMIN}/coaches/{coach.id}", headers=headers)).status_code == 204
    assert (await client.get(f"{ADMIN}/coaches/{coach.id}", headers=headers)).status_code == 404


async def test_customer_workouts_for_coach(
    client, make_user, customer, auth_headers, link_customer
):
    coach = await make_user("coach@example.com", "coach")
    stranger = await make_user("stranger@example.com", "coach")
    created = await client.post(
        "/api/v1/workouts", json={"name": "Mine"}, headers=auth_headers(customer)
    )
    await link_customer(coach, customer)

    url = f"/api/v1/coach/customers/{customer.id}/workouts"
    resp = await client.get(url, headers=auth_headers(coach))
    assert resp.status_code == 200
    assert [w["id"] for w in resp.json()] == [created.json()["id"]]

    assert (await client.get(url, headers=auth_headers(stranger))).status_code == 403


async def test_replace_customers_rejects_unknown_ids(client, admin, make_user, auth_headers):
    coach_user = await make_user("coach@example.com", "coach")
    resp = await client.put(
        f"{ADMIN}/coaches/{coach_user.id}/customers",
        json={"customer_ids": ["00000000-0000-0000-0000-0000000000bb"]},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 400


async def test_add_unknown_customer_is_not_found(client, admin, make_user, auth_headers):
    coach_user = await make_user("coach@example.com", "coach")
    created = await client.put(
        f"{ADMIN}/coaches/{coach_user.id}/customers",
        json={"customer_ids": []},
        headers=auth_headers(admin),
    )
    resp = await client.patch(
        f"{ADMIN}/coaches/{created.json()['id']}/customers",
        json={"customer_id": "00000000-0000-0000-0000-0000000000cc", "action": "add"},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 404
