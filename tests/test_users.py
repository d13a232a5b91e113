"""
Account registration, login, self-service and admin management.
"""

from sqlalchemy import select

from uaifood.core.security import verify_password
from uaifood.models import User
from tests.conftest import DEFAULT_PASSWORD, auth, login, register, user_payload


# =============================================================================
# REGISTRATION & LOGIN
# =============================================================================

async def test_register_creates_client_without_exposing_password(client, session_maker):
    response = await client.post("/api/users", json=user_payload("maria@example.com"))

    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "maria@example.com"
    assert body["role"] == "CLIENT"
    assert "password" not in body

    async with session_maker() as session:
        user = await session.scalar(select(User).where(User.email == "maria@example.com"))
    assert user.password != DEFAULT_PASSWORD
    assert verify_password(DEFAULT_PASSWORD, user.password)


async def test_register_ignores_role_in_payload(client):
    response = await client.post(
        "/api/users", json=user_payload("sneaky@example.com", role="ADMIN")
    )

    assert response.status_code == 201
    assert response.json()["role"] == "CLIENT"


async def test_register_duplicate_email_conflicts(client, session_maker):
    await register(client, "dup@example.com")

    response = await client.post("/api/users", json=user_payload("dup@example.com", name="Other"))

    assert response.status_code == 409
    assert response.json() == {"message": "This email is already in use."}
    async with session_maker() as session:
        users = (await session.scalars(select(User).where(User.email == "dup@example.com"))).all()
    assert len(users) == 1


async def test_register_requires_terms_acceptance(client):
    response = await client.post(
        "/api/users", json=user_payload("terms@example.com", accepts_terms=False)
    )

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation error"
    assert body["errors"]


async def test_register_rejects_short_password_and_bad_email(client):
    response = await client.post(
        "/api/users", json=user_payload("not-an-email", password="123")
    )

    assert response.status_code == 400
    fields = {tuple(err["loc"])[-1] for err in response.json()["errors"]}
    assert {"email", "password"} <= fields


async def test_login_returns_token(client):
    await register(client, "login@example.com")

    response = await client.post(
        "/api/users/login",
        json={"email": "login@example.com", "password": DEFAULT_PASSWORD},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Login successful!"
    assert body["token"]


async def test_login_failures_share_one_message(client):
    await register(client, "known@example.com")

    wrong_password = await client.post(
        "/api/users/login", json={"email": "known@example.com", "password": "nope-nope"}
    )
    unknown_email = await client.post(
        "/api/users/login", json={"email": "ghost@example.com", "password": DEFAULT_PASSWORD}
    )

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"message": "Invalid email or password."}


# =============================================================================
# SELF-SERVICE
# =============================================================================

async def test_read_me(client, client_token):
    response = await client.get("/api/users/me", headers=auth(client_token))

    assert response.status_code == 200
    assert response.json()["email"] == "client@example.com"


async def test_partial_profile_update_keeps_other_fields(client, client_token):
    before = (await client.get("/api/users/me", headers=auth(client_token))).json()

    response = await client.put(
        "/api/users/me", json={"phone": "34911112222"}, headers=auth(client_token)
    )

    assert response.status_code == 200
    after = response.json()
    assert after["phone"] == "34911112222"
    assert after["name"] == before["name"]
    assert after["email"] == before["email"]


async def test_change_password(client, client_token):
    response = await client.put(
        "/api/users/me/password",
        json={"old_password": DEFAULT_PASSWORD, "new_password": "brand-new-pass"},
        headers=auth(client_token),
    )

    assert response.status_code == 204
    await login(client, "client@example.com", "brand-new-pass")


async def test_change_password_with_wrong_old_password(client, client_token, session_maker):
    async with session_maker() as session:
        before = await session.scalar(select(User.password).where(User.email == "client@example.com"))

    response = await client.put(
        "/api/users/me/password",
        json={"old_password": "not-my-password", "new_password": "brand-new-pass"},
        headers=auth(client_token),
    )

    assert response.status_code == 401
    assert response.json() == {"message": "The old password is incorrect."}
    async with session_maker() as session:
        after = await session.scalar(select(User.password).where(User.email == "client@example.com"))
    assert after == before
    await login(client, "client@example.com")


async def test_delete_me(client, client_token):
    response = await client.delete("/api/users/me", headers=auth(client_token))

    assert response.status_code == 204
    failed = await client.post(
        "/api/users/login",
        json={"email": "client@example.com", "password": DEFAULT_PASSWORD},
    )
    assert failed.status_code == 401


# =============================================================================
# ADMIN
# =============================================================================

async def test_admin_lists_and_reads_users(client, admin_token, client_token):
    listing = await client.get("/api/users", headers=auth(admin_token))

    assert listing.status_code == 200
    emails = [u["email"] for u in listing.json()]
    assert emails == ["admin@example.com", "client@example.com"]

    client_id = listing.json()[1]["id"]
    single = await client.get(f"/api/users/{client_id}", headers=auth(admin_token))
    assert single.status_code == 200
    assert single.json()["email"] == "client@example.com"


async def test_admin_get_unknown_user(client, admin_token):
    response = await client.get("/api/users/9999", headers=auth(admin_token))

    assert response.status_code == 404
    assert response.json() == {"message": "User not found."}


async def test_admin_promotes_user(client, admin_token, client_token):
    me = (await client.get("/api/users/me", headers=auth(client_token))).json()

    response = await client.put(
        f"/api/users/{me['id']}", json={"role": "ADMIN"}, headers=auth(admin_token)
    )

    assert response.status_code == 200
    assert response.json()["role"] == "ADMIN"
    assert response.json()["name"] == me["name"]


async def test_admin_cannot_manage_self_through_admin_routes(client, admin_token):
    me = (await client.get("/api/users/me", headers=auth(admin_token))).json()

    updated = await client.put(
        f"/api/users/{me['id']}", json={"role": "CLIENT"}, headers=auth(admin_token)
    )
    deleted = await client.delete(f"/api/users/{me['id']}", headers=auth(admin_token))

    assert updated.status_code == 403
    assert deleted.status_code == 403
    still_there = await client.get("/api/users/me", headers=auth(admin_token))
    assert still_there.json()["role"] == "ADMIN"


async def test_admin_deletes_user(client, admin_token, client_token):
    me = (await client.get("/api/users/me", headers=auth(client_token))).json()

    response = await client.delete(f"/api/users/{me['id']}", headers=auth(admin_token))

    assert response.status_code == 204
    gone = await client.get(f"/api/users/{me['id']}", headers=auth(admin_token))
    assert gone.status_code == 404


async def test_client_cannot_use_admin_routes(client, client_token):
    response = await client.get("/api/users", headers=auth(client_token))

    assert response.status_code == 403
    assert response.json() == {"message": "Access denied. Administrator privileges required."}
