"""Tests for the current user, profile and health endpoints."""

import pytest

from athena.llm.gemini_client import GeminiClient
from athena.main import app


class TestCurrentUser:
    """Tests for GET /api/current_user."""

    @pytest.mark.asyncio
    async def test_anonymous(self, client):
        response = await client.get("/api/current_user")

        assert response.status_code == 200
        assert response.json() is None

    @pytest.mark.asyncio
    async def test_first_sight_creates_user(self, client):
        headers = {
            "X-User-Id": "google-123",
            "X-User-Email": "ada@example.com",
            "X-User-Name": "Ada",
        }

        response = await client.get("/api/current_user", headers=headers)

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == "google-123"
        assert data["email"] == "ada@example.com"
        assert data["displayName"] == "Ada"
        assert data["branch"] is None


class TestProfile:
    """Tests for POST /api/profile."""

    @pytest.mark.asyncio
    async def test_requires_identity(self, client):
        response = await client.post("/api/profile", json={"displayName": "Ada"})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_update_profile(self, client, auth_headers):
        headers = auth_headers("google-123")

        response = await client.post(
            "/api/profile",
            json={"displayName": "Ada L.", "branch": "CSE", "year": 2},
            headers=headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["displayName"] == "Ada L."
        assert data["branch"] == "CSE"
        assert data["year"] == "2"

    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, client, auth_headers):
        headers = auth_headers("google-123")
        await client.post(
            "/api/profile",
            json={"displayName": "Ada", "branch": "CSE", "year": 2},
            headers=headers,
        )

        response = await client.post(
            "/api/profile", json={"displayName": "Ada L."}, headers=headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["displayName"] == "Ada L."
        assert data["branch"] == "CSE"
        assert data["year"] == "2"

    @pytest.mark.asyncio
    async def test_explicit_null_clears_field(self, client, auth_headers):
        headers = auth_headers("google-123")
        await client.post("/api/profile", json={"branch": "CSE"}, headers=headers)

        response = await client.post(
            "/api/profile", json={"branch": None}, headers=headers
        )

        assert response.json()["branch"] is None

    @pytest.mark.asyncio
    async def test_profile_survives_next_login(self, client):
        """Identity headers on later requests do not overwrite profile edits."""
        first = {"X-User-Id": "google-123", "X-User-Name": "Ada"}
        await client.post("/api/profile", json={"displayName": "Ada L."}, headers=first)

        response = await client.get(
            "/api/current_user",
            headers={"X-User-Id": "google-123", "X-User-Name": "Someone Else"},
        )

        assert response.json()["displayName"] == "Ada L."


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, client, monkeypatch):
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
        monkeypatch.setattr(app.state, "gemini_client", GeminiClient(), raising=False)

        response = await client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is True
        assert data["geminiKeyPresent"] is False
        assert data["geminiModel"]
        assert data["dbConnected"] is True

    @pytest.mark.asyncio
    async def test_health_reports_client_key(self, client, monkeypatch):
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
        monkeypatch.setattr(
            app.state, "gemini_client", GeminiClient(api_key="test-key"), raising=False
        )

        response = await client.get("/api/health")

        assert response.json()["geminiKeyPresent"] is True
