import datetime as dt
import uuid

import pytest

from app.core.security import token_service
from app.models.user import User

pytestmark = pytest.mark.asyncio


async def register_user(client, email: str, password: str, **profile):
    return await client.post(
        "/api/v1/auth/register",
        json={"email": email, "password": password, **profile},
    )


async def login_user(client, email: str, password: str):
    return await client.post(
        "/api/v1/auth/login",
        json={"email": email, "password": password},
    )


def _email() -> str:
    return f"user_{uuid.uuid4().hex[:8]}@example.com"


async def test_register_and_login_flow(client):
    email = _email()
    resp = await register_user(client, email, "secret1", businessName="Acme Dental")
    body = resp.json()
    assert resp.status_code == 201
    assert body["success"] is True
    assert body["data"]["token"]
    assert body["data"]["user"]["email"] == email
    assert body["data"]["user"]["businessName"] == "Acme Dental"
    assert "passwordHash" not in body["data"]["user"]

    login_resp = await login_user(client, email, "secret1")
    assert login_resp.status_code == 200
    identity = token_service.verify(login_resp.json()["data"]["token"])
    assert identity.email == email
    assert identity.id == body["data"]["user"]["id"]


async def test_duplicate_email_rejected_and_first_user_unaffected(client):
    email = _email()
    first = await register_user(client, email, "secret1", fullName="First")
    assert first.status_code == 201

    dup = await register_user(client, email, "other-password", fullName="Second")
    assert dup.status_code == 400
    assert dup.json()["error"]["code"] == "DUPLICATE_EMAIL"

    # Original credentials and profile still in place
    login_resp = await login_user(client, email, "secret1")
    assert login_resp.status_code == 200
    assert login_resp.json()["data"]["user"]["fullName"] == "First"
    assert (await login_user(client, email, "other-password")).status_code == 401


async def test_email_uniqueness_is_case_sensitive(client):
    local = uuid.uuid4().hex[:8]
    assert (await register_user(client, f"alice.{local}@example.com", "secret1")).status_code == 201
    assert (await register_user(client, f"Alice.{local}@example.com", "secret1")).status_code == 201


async def test_email_domain_case_is_preserved(client):
    local = uuid.uuid4().hex[:8]
    mixed = f"alice.{local}@EXAMPLE.com"

    first = await register_user(client, mixed, "secret1")
    assert first.status_code == 201
    assert first.json()["data"]["user"]["email"] == mixed
    assert (await User.get(email=mixed)).email == mixed

    lower = await register_user(client, f"alice.{local}@example.com", "secret1")
    assert lower.status_code == 201

    # Login matches the stored address exactly
    assert (await login_user(client, mixed, "secret1")).json()["data"]["user"]["email"] == mixed


async def test_register_validation_errors(client):
    resp = await register_user(client, "not-an-email", "123")
    body = resp.json()
    assert resp.status_code == 400
    assert body["error"]["code"] == "VALIDATION_ERROR"
    fields = {f["field"] for f in body["error"]["fields"]}
    assert fields == {"email", "password"}


async def test_invalid_login(client):
    email = _email()
    await register_user(client, email, "secret1")
    wrong_pwd = await login_user(client, email, "wrong-password")
    unknown = await login_user(client, _email(), "secret1")
    assert wrong_pwd.status_code == unknown.status_code == 401
    assert wrong_pwd.json() == unknown.json()
    assert wrong_pwd.json()["error"]["code"] == "INVALID_CREDENTIALS"


async def test_profile_get_and_partial_update(client, auth_header_factory):
    email = _email()
    headers = await auth_header_factory(email=email)

    get_resp = await client.get("/api/v1/auth/profile", headers=headers)
    assert get_resp.status_code == 200
    assert get_resp.json()["data"]["email"] == email
    assert get_resp.json()["data"]["theme"] is None

    patch_resp = await client.patch(
        "/api/v1/auth/profile",
        headers=headers,
        json={"businessName": "Acme", "city": "Austin", "theme": "emerald"},
    )
    assert patch_resp.status_code == 200
    assert patch_resp.json()["data"]["businessName"] == "Acme"

    second = await client.patch("/api/v1/auth/profile", headers=headers, json={"city": "Dallas"})
    data = second.json()["data"]
    assert data["city"] == "Dallas"
    assert data["businessName"] == "Acme"  # untouched
    assert data["theme"] == "emerald"


async def test_profile_update_cannot_change_email(client, auth_header_factory):
    email = _email()
    headers = await auth_header_factory(email=email)
    resp = await client.patch(
        "/api/v1/auth/profile", headers=headers, json={"email": "hijack@example.com", "fullName": "Al"}
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["email"] == email
    assert (await login_user(client, email, "secret1")).status_code == 200


async def test_unauthorized_responses_are_uniform(client, auth_header_factory):
    headers = await auth_header_factory()
    profile = (await client.get("/api/v1/auth/profile", headers=headers)).json()["data"]

    class _Stale:
        id = profile["id"]
        email = profile["email"]
        token_version = 0

    expired = token_service.issue(
        _Stale(), now=dt.datetime.now(dt.timezone.utc) - dt.timedelta(days=8)
    )
    attempts = [
        {},
        {"Authorization": "Bearer"},
        {"Authorization": "Bearer not.a.token"},
        {"Authorization": f"Bearer {expired}"},
        {"Authorization": headers["Authorization"].replace("Bearer ", "Token ")},
    ]
    bodies = []
    for h in attempts:
        resp = await client.get("/api/v1/auth/profile", headers=h)
        assert resp.status_code == 401
        assert resp.headers["www-authenticate"] == "Bearer"
        bodies.append(resp.json())
    assert all(b == bodies[0] for b in bodies)
    assert bodies[0]["error"]["code"] == "UNAUTHORIZED"


async def test_logout_revokes_existing_tokens(client):
    email = _email()
    await register_user(client, email, "secret1")
    token_a = (await login_user(client, email, "secret1")).json()["data"]["token"]
    headers_a = {"Authorization": f"Bearer {token_a}"}

    logout = await client.post("/api/v1/auth/logout", headers=headers_a)
    assert logout.status_code == 200

    assert (await client.get("/api/v1/auth/profile", headers=headers_a)).status_code == 401

    token_b = (await login_user(client, email, "secret1")).json()["data"]["token"]
    fresh = await client.get("/api/v1/auth/profile", headers={"Authorization": f"Bearer {token_b}"})
    assert fresh.status_code == 200


async def test_token_with_non_uuid_subject_is_rejected(client):
    class _Forged:
        id = "not-a-uuid"
        email = "forged@example.com"
        token_version = 0

    resp = await client.get(
        "/api/v1/auth/profile",
        headers={"Authorization": f"Bearer {token_service.issue(_Forged())}"},
    )
    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "UNAUTHORIZED"
