"""
Integration Tests for Tags API.
"""

import pytest
from httpx import AsyncClient


class TestCreateTag:
    """Tests for POST /api/v1/tags."""

    @pytest.mark.asyncio
    async def test_create_tag(self, client: AsyncClient, api, auth_headers):
        response = await client.post(
            "/api/v1/tags", json={"name": "Deep Work", "color": "#10B981"}, headers=auth_headers,
        )

        data = api.assert_success(response, expected_status=201)["data"]
        assert data["name"] == "Deep Work"
        assert data["color"] == "#10B981"

    @pytest.mark.asyncio
    async def test_default_color(self, client: AsyncClient, api, auth_headers):
        response = await client.post("/api/v1/tags", json={"name": "home"}, headers=auth_headers)

        assert api.assert_success(response, expected_status=201)["data"]["color"] == "#3B82F6"

    @pytest.mark.asyncio
    async def test_duplicate_name_any_case_conflicts(self, client: AsyncClient, api, auth_headers):
        await client.post("/api/v1/tags", json={"name": "Work"}, headers=auth_headers)

        response = await client.post("/api/v1/tags", json={"name": "WORK"}, headers=auth_headers)

        api.assert_error(response, 409, "RES_CONFLICT")

    @pytest.mark.asyncio
    async def test_same_name_for_another_owner(
        self, client: AsyncClient, api, auth_headers, other_auth_headers,
    ):
        await client.post("/api/v1/tags", json={"name": "Work"}, headers=auth_headers)

        response = await client.post("/api/v1/tags", json={"name": "work"}, headers=other_auth_headers)

        api.assert_success(response, expected_status=201)

    @pytest.mark.asyncio
    async def test_invalid_color(self, client: AsyncClient, api, auth_headers):
        response = await client.post(
            "/api/v1/tags", json={"name": "work", "color": "red"}, headers=auth_headers,
        )

        api.assert_error(response, 400, "VAL_VALIDATION_ERROR")

    @pytest.mark.asyncio
    async def test_note_tagging_reuses_explicit_tag(self, client: AsyncClient, api, auth_headers):
        await client.post("/api/v1/tags", json={"name": "Work"}, headers=auth_headers)

        response = await client.post(
            "/api/v1/notes", json={"title": "Plan", "tags": ["work"]}, headers=auth_headers,
        )

        assert api.assert_success(response, expected_status=201)["data"]["tags"] == ["Work"]


class TestListTags:
    """Tests for GET /api/v1/tags."""

    @pytest.mark.asyncio
    async def test_alphabetical_and_scoped(
        self, client: AsyncClient, api, auth_headers, other_auth_headers,
    ):
        for name in ["zeta", "alpha"]:
            await client.post("/api/v1/tags", json={"name": name}, headers=auth_headers)
        await client.post("/api/v1/tags", json={"name": "beta"}, headers=other_auth_headers)

        response = await client.get("/api/v1/tags", headers=auth_headers)

        assert [t["name"] for t in api.assert_success(response)["data"]] == ["alpha", "zeta"]

    @pytest.mark.asyncio
    async def test_requires_token(self, client: AsyncClient, api):
        api.assert_error(await client.get("/api/v1/tags"), 401, "AUTH_UNAUTHORIZED")
