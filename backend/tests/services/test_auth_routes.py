"""Admin auth routes — registration, bootstrap secret, login cookie, token checks.

Invariants:
    - Duplicate emails are a 409, bad credentials a 401, disabled accounts a 403
    - Login sets the HttpOnly session cookie and returns the same token in the body
    - Admin routes accept the cookie as well as the Bearer header
    - validate-shared-token answers {valid: false} instead of an error
"""

from photobooth.config import get_settings

from tests.services.conftest import ADMIN_PASSWORD


async def test_register_creates_admin(client):
    res = await client.post("/api/v1/auth/register", json={
        "email": "  New@Studio.EXAMPLE.COM ", "password": "longenough", "company_name": "Studio",
    })

    assert res.status_code == 201
    body = res.json()
    assert body["email"] == "new@studio.example.com"
    assert body["company_name"] == "Studio"
    assert body["is_active"] is True
    assert "password_hash" not in body


async def test_register_duplicate_email_is_conflict(client, admin):
    res = await client.post("/api/v1/auth/register", json={
        "email": admin.email, "password": "longenough",
    })

    assert res.status_code == 409
    assert res.json()["error"]["code"] == "CONFLICT"


async def test_register_rejects_short_password(client):
    res = await client.post("/api/v1/auth/register", json={
        "email": "a@b.example.com", "password": "123",
    })

    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_bootstrap_admin_requires_secret(client):
    bad = await client.post("/api/v1/auth/admins", json={
        "email": "boot@studio.example.com", "password": "longenough", "secret_key": "nope",
    })
    good = await client.post("/api/v1/auth/admins", json={
        "email": "boot@studio.example.com", "password": "longenough",
        "secret_key": get_settings().admin_signup_secret,
    })

    assert bad.status_code == 403
    assert good.status_code == 201


async def test_bootstrap_refused_when_no_secret_configured(client, override_settings):
    override_settings(admin_signup_secret="")

    res = await client.post("/api/v1/auth/admins", json={
        "email": "boot@studio.example.com", "password": "longenough", "secret_key": "anything",
    })

    assert res.status_code == 403


async def test_login_sets_cookie_and_returns_token(client, admin):
    res = await client.post("/api/v1/auth/login", json={
        "email": admin.email, "password": ADMIN_PASSWORD,
    })

    assert res.status_code == 200
    body = res.json()
    assert body["token_type"] == "bearer"
    assert body["admin"]["id"] == str(admin.id)
    cookie = res.cookies.get(get_settings().admin_cookie_name)
    assert cookie == body["access_token"]
    assert "httponly" in res.headers["set-cookie"].lower()


async def test_login_wrong_password_is_401(client, admin):
    res = await client.post("/api/v1/auth/login", json={
        "email": admin.email, "password": "wrong-password",
    })

    assert res.status_code == 401
    assert res.json()["error"]["code"] == "AUTHENTICATION_REQUIRED"


async def test_login_disabled_account_is_403(client, admin, test_db):
    admin.is_active = False
    await test_db.commit()

    res = await client.post("/api/v1/auth/login", json={
        "email": admin.email, "password": ADMIN_PASSWORD,
    })

    assert res.status_code == 403


async def test_me_with_bearer_token(client, admin, auth_headers):
    res = await client.get("/api/v1/auth/me", headers=auth_headers)

    assert res.status_code == 200
    assert res.json()["email"] == admin.email


async def test_me_with_session_cookie(client, admin):
    login = await client.post("/api/v1/auth/login", json={
        "email": admin.email, "password": ADMIN_PASSWORD,
    })
    token = login.json()["access_token"]

    res = await client.get(
        "/api/v1/auth/me",
        headers={"Cookie": f"{get_settings().admin_cookie_name}={token}"},
    )

    assert res.status_code == 200
    assert res.json()["id"] == str(admin.id)


async def test_me_without_credentials_is_401(client):
    res = await client.get("/api/v1/auth/me")

    assert res.status_code == 401


async def test_me_with_garbage_token_is_401(client):
    res = await client.get(
        "/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"},
    )

    assert res.status_code == 401


async def test_logout_clears_cookie(client):
    res = await client.post("/api/v1/auth/logout")

    assert res.status_code == 204
    assert get_settings().admin_cookie_name in res.headers.get("set-cookie", "")


async def test_validate_shared_token(client, admin, auth_headers):
    token = auth_headers["Authorization"].split(" ", 1)[1]

    valid = await client.post("/api/v1/auth/validate-shared-token", json={"token": token})
    invalid = await client.post(
        "/api/v1/auth/validate-shared-token", json={"token": "forged"},
    )

    assert valid.json()["valid"] is True
    assert valid.json()["admin"]["email"] == admin.email
    assert invalid.status_code == 200
    assert invalid.json() == {"valid": False, "admin": None}
