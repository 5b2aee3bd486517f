"""
Reprint Backend — Auth Stub API Tests
=======================================

What:  /api/auth/login and /api/auth/signup through the ASGI app, backed by
       the per-test StaticCredentialStore from conftest.

What we test:
    ✅ Valid login returns {success, user, token}
    ✅ Wrong password and unknown email return 401
    ✅ Signup then login with the new account
    ✅ Duplicate signup returns 400
    ✅ Malformed bodies return 400
"""

import pytest

from reprint.config import settings

from conftest import SEEDED_EMAIL, SEEDED_PASSWORD


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_success(self, test_client):
        response = await test_client.post(
            "/api/auth/login", json={"email": SEEDED_EMAIL, "password": SEEDED_PASSWORD}
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "user": {"email": SEEDED_EMAIL, "role": "admin"},
            "token": settings.auth_placeholder_token,
        }

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "email,password",
        [
            (SEEDED_EMAIL, "wrong"),
            ("ghost@library.test", SEEDED_PASSWORD),
        ],
    )
    async def test_login_failure(self, test_client, email, password):
        response = await test_client.post(
            "/api/auth/login", json={"email": email, "password": password}
        )

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid credentials"

    @pytest.mark.asyncio
    async def test_login_missing_password(self, test_client):
        response = await test_client.post("/api/auth/login", json={"email": SEEDED_EMAIL})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request"


class TestSignup:

    @pytest.mark.asyncio
    async def test_signup_then_login(self, test_client):
        credentials = {"email": "new.reader@library.test", "password": "bookworm"}

        signup = await test_client.post("/api/auth/signup", json=credentials)
        login = await test_client.post("/api/auth/login", json=credentials)

        assert signup.status_code == 200
        assert signup.json()["user"]["role"] == settings.auth_default_role
        assert login.status_code == 200
        assert login.json()["user"]["email"] == "new.reader@library.test"

    @pytest.mark.asyncio
    async def test_duplicate_signup(self, test_client):
        response = await test_client.post(
            "/api/auth/signup", json={"email": SEEDED_EMAIL, "password": "another"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "User already exists"
