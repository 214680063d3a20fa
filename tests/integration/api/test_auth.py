"""
Integration tests for registration, login and the health check.
"""

import pytest

TEST_PASSWORD = "SecurePass123"


class TestRegistration:

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_register_and_me(self, async_client, register_user):
        user, headers = await register_user("alice@example.com")

        response = await async_client.get("/auth/me", headers=headers)

        assert response.status_code == 200
        assert response.json()["uuid"] == user["uuid"]
        assert response.json()["email"] == "alice@example.com"
        assert "password_hash" not in response.json()

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_duplicate_email(self, async_client, register_user):
        await register_user("alice@example.com")

        response = await async_client.post("/auth/register", json={
            "email": "alice@example.com",
            "username": "another_alice",
            "password": TEST_PASSWORD,
        })

        assert response.status_code == 400
        assert response.json() == {"message": "Email already registered"}

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_weak_password_rejected(self, async_client):
        response = await async_client.post("/auth/register", json={
            "email": "weak@example.com",
            "username": "weak_user",
            "password": "password",
        })

        assert response.status_code == 422


class TestLogin:

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_wrong_password(self, async_client, register_user):
        await register_user("bob@example.com")

        response = await async_client.post("/auth/login", json={
            "email": "bob@example.com",
            "password": "WrongPass123",
        })

        assert response.status_code == 401
        assert response.json() == {"message": "Incorrect email or password"}

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_me_requires_token(self, async_client):
        response = await async_client.get("/auth/me")

        assert response.status_code == 401


class TestHealth:

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_health_endpoint(self, async_client):
        response = await async_client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}
