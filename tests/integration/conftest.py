"""
Integration Test Fixtures.

Fixtures for integration tests - uses a real database and services.
These fixtures build on the root conftest.py database fixtures.
"""

from collections.abc import AsyncGenerator, Generator
from typing import Any

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from notedesk.backend.core.database import get_db_session
from notedesk.backend.core.security import create_access_token


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def app(db_session: AsyncSession) -> Generator[FastAPI, None, None]:
    """
    Create the application with the database session overridden.

    Every request in the test shares the test session, which is rolled
    back afterwards.
    """
    from notedesk.backend.main import create_app

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    application = create_app()
    application.dependency_overrides[get_db_session] = override_get_db_session
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client for the application.

    Usage:
        async def test_health_endpoint(client: AsyncClient):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client


# =============================================================================
# API Response Assertion Helpers
# =============================================================================


class ApiAssertions:
    """Helper class for API response assertions."""

    @staticmethod
    def assert_success(response: Any, expected_status: int = 200) -> dict[str, Any]:
        """Assert API response is successful and return its JSON."""
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is True, f"Response not successful: {data}"
        return data

    @staticmethod
    def assert_error(
        response: Any,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        """Assert API response is an error, optionally with a given code."""
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is False, f"Response should be error: {data}"
        assert data.get("error") is not None, f"Missing error details: {data}"

        if expected_code:
            actual_code = data["error"].get("code")
            assert actual_code == expected_code, (
                f"Expected error code {expected_code}, got {actual_code}"
            )

        return data

    @staticmethod
    def assert_validation_error(
        response: Any,
        field: str | None = None,
    ) -> dict[str, Any]:
        """Assert API response is a request validation error (422)."""
        data = ApiAssertions.assert_error(response, 422, "VAL_REQUEST_INVALID")

        if field:
            errors = data["error"].get("details", {}).get("validation_errors", [])
            fields = [e.get("field", "") for e in errors]
            assert any(field in f for f in fields), (
                f"Expected validation error for field '{field}', "
                f"got errors for: {fields}"
            )

        return data


@pytest.fixture
def api() -> ApiAssertions:
    """Provide API assertion helpers."""
    return ApiAssertions()


# =============================================================================
# Authentication Fixtures
# =============================================================================


def bearer(owner_id: str) -> dict[str, str]:
    """Authorization header for an owner."""
    return {"Authorization": f"Bearer {create_access_token(data={'sub': owner_id})}"}


@pytest.fixture
def auth_headers(owner_id: str) -> dict[str, str]:
    """
    Provide authentication headers for API requests.

    Usage:
        async def test_list_notes(client: AsyncClient, auth_headers: dict):
            response = await client.get("/api/v1/notes", headers=auth_headers)
            assert response.status_code == 200
    """
    return bearer(owner_id)


@pytest.fixture
def other_auth_headers(other_owner_id: str) -> dict[str, str]:
    """Authentication headers for a second owner."""
    return bearer(other_owner_id)
