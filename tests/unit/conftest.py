"""
Unit Test Fixtures.

Fixtures for unit tests - all external dependencies are mocked.
Unit tests should be fast and isolated, never touching real databases.
"""

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest


# =============================================================================
# Database Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """
    Mock database session for unit tests.

    Usage:
        def test_service(mock_db_session: AsyncMock):
            service = NoteService(mock_db_session)
    """
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def mock_db_result() -> MagicMock:
    """
    Mock database query result.

    Usage:
        def test_query(mock_db_session, mock_db_result):
            mock_db_result.scalar_one_or_none.return_value = "tag-1"
            mock_db_session.execute.return_value = mock_db_result
    """
    result = MagicMock()
    result.scalar_one_or_none = MagicMock(return_value=None)
    result.scalars = MagicMock()
    result.scalars.return_value.all = MagicMock(return_value=[])
    result.rowcount = 0
    return result


# =============================================================================
# Model Factories
# =============================================================================


@pytest.fixture
def make_note():
    """
    Factory for note-like mocks.

    Usage:
        note = make_note(id="note-1", tag_names=["work"])
    """

    def _make(**overrides) -> MagicMock:
        note = MagicMock()
        note.id = overrides.get("id", "note-1")
        note.title = overrides.get("title", "Test Note")
        note.content = overrides.get("content", "")
        note.is_pinned = overrides.get("is_pinned", False)
        note.tag_names = overrides.get("tag_names", [])
        note.updated_at = overrides.get("updated_at", datetime(2024, 1, 1, 12, 0, 0))
        return note

    return _make


@pytest.fixture
def make_task():
    """Factory for task-like mocks."""

    def _make(**overrides) -> MagicMock:
        task = MagicMock()
        task.id = overrides.get("id", "task-1")
        task.title = overrides.get("title", "Test Task")
        task.description = overrides.get("description")
        task.priority = overrides.get("priority", "medium")
        task.is_completed = overrides.get("is_completed", False)
        task.due_date = overrides.get("due_date")
        task.tag_names = overrides.get("tag_names", [])
        task.updated_at = overrides.get("updated_at", datetime(2024, 1, 1, 12, 0, 0))
        return task

    return _make
