"""
Unit Tests for Task Service.

Tests the TaskService business logic with mocked repositories.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest

from notedesk.backend.core.exceptions import NotAuthenticatedError, ValidationError
from notedesk.backend.repositories.tag_association import ReconcileResult, TaskTagRepository
from notedesk.backend.schemas.task import TaskCreate, TaskUpdate
from notedesk.backend.services.task import TaskService


@pytest.fixture
def service(mock_db_session):
    """TaskService over a mocked session."""
    return TaskService(mock_db_session)


def test_links_are_task_tags(service):
    assert isinstance(service.links, TaskTagRepository)
    assert service.links.entity_key == "task_id"


class TestTaskServiceCreate:
    """Tests for task creation and tag intent."""

    @pytest.mark.asyncio
    async def test_create_without_tags_skips_reconciliation(self, service, make_task):
        task = make_task()

        with patch.object(service.repo, "create", AsyncMock(return_value=task)) as mock_create, \
             patch.object(service.repo, "refresh_tags", AsyncMock(return_value=task)), \
             patch.object(service.links, "reconcile", AsyncMock()) as mock_reconcile:
            result = await service.create_task("user-1", TaskCreate(title="Report"))

            mock_create.assert_called_once_with(
                owner_id="user-1",
                title="Report",
                description=None,
                priority="medium",
                due_date=None,
            )
            mock_reconcile.assert_not_called()
            assert result is task

    @pytest.mark.asyncio
    async def test_create_with_tags_resolves_then_reconciles(self, service, make_task):
        task = make_task(tag_names=["work"])

        with patch.object(service.repo, "create", AsyncMock(return_value=task)), \
             patch.object(service.repo, "refresh_tags", AsyncMock(return_value=task)), \
             patch.object(
                 service.tag_repo, "resolve_many", AsyncMock(return_value=["t-work"])
             ) as mock_resolve, \
             patch.object(
                 service.links, "reconcile", AsyncMock(return_value=ReconcileResult(added=1))
             ) as mock_reconcile:
            await service.create_task("user-1", TaskCreate(title="Report", tags=["Work", "work"]))

            mock_resolve.assert_called_once_with("user-1", ["Work", "work"])
            mock_reconcile.assert_called_once_with("task-1", ["t-work"])

    @pytest.mark.asyncio
    async def test_due_date_stored_as_naive_utc(self, service, make_task):
        due = datetime(2024, 3, 1, 9, 0, tzinfo=timezone(timedelta(hours=2)))

        with patch.object(service.repo, "create", AsyncMock(return_value=make_task())) as mock_create, \
             patch.object(service.repo, "refresh_tags", AsyncMock(side_effect=lambda t: t)):
            await service.create_task("user-1", TaskCreate(title="Report", due_date=due))

        assert mock_create.call_args.kwargs["due_date"] == datetime(2024, 3, 1, 7, 0)

    @pytest.mark.asyncio
    async def test_too_many_tags_rejected_before_write(self, service):
        names = [f"tag{i}" for i in range(11)]

        with patch.object(service.repo, "create", AsyncMock()) as mock_create:
            with pytest.raises(ValidationError) as exc_info:
                await service.create_task("user-1", TaskCreate(title="Report", tags=names))

            assert "tags" in exc_info.value.details
            mock_create.assert_not_called()

    @pytest.mark.asyncio
    async def test_duplicate_names_count_once_toward_limit(self, service, make_task):
        names = [f"tag{i}" for i in range(10)] + ["TAG0", " tag1 "]
        task = make_task()

        with patch.object(service.repo, "create", AsyncMock(return_value=task)), \
             patch.object(service.repo, "refresh_tags", AsyncMock(return_value=task)), \
             patch.object(service.tag_repo, "resolve_many", AsyncMock(return_value=[])), \
             patch.object(service.links, "reconcile", AsyncMock(return_value=ReconcileResult())):
            await service.create_task("user-1", TaskCreate(title="Report", tags=names))

    @pytest.mark.asyncio
    async def test_long_description_rejected(self, service):
        with pytest.raises(ValidationError) as exc_info:
            await service.create_task(
                "user-1", TaskCreate(title="Report", description="x" * 2001),
            )

        assert "description" in exc_info.value.details

    @pytest.mark.asyncio
    async def test_requires_owner(self, service):
        with pytest.raises(NotAuthenticatedError):
            await service.create_task("  ", TaskCreate(title="Report"))


class TestTaskServiceUpdate:
    """Tests for partial updates."""

    @pytest.mark.asyncio
    async def test_null_clears_description_but_not_title(self, service, make_task):
        task = make_task(description="old")

        with patch.object(service.repo, "get_by_id", AsyncMock(return_value=task)), \
             patch.object(service.repo, "update", AsyncMock(return_value=task)) as mock_update, \
             patch.object(service.repo, "refresh_tags", AsyncMock(return_value=task)), \
             patch.object(service.links, "reconcile", AsyncMock()) as mock_reconcile:
            await service.update_task(
                "user-1",
                "task-1",
                TaskUpdate.model_validate({"title": None, "description": None}),
            )

            fields = mock_update.call_args.kwargs
            assert fields["description"] is None
            assert "title" not in fields
            assert "updated_at" in fields
            mock_reconcile.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_tags_clears_links(self, service, make_task):
        task = make_task(tag_names=["work"])

        with patch.object(service.repo, "get_by_id", AsyncMock(return_value=task)), \
             patch.object(service.repo, "update", AsyncMock(return_value=task)), \
             patch.object(service.repo, "refresh_tags", AsyncMock(return_value=task)), \
             patch.object(service.tag_repo, "resolve_many", AsyncMock(return_value=[])), \
             patch.object(
                 service.links, "reconcile", AsyncMock(return_value=ReconcileResult(removed=1))
             ) as mock_reconcile:
            await service.update_task("user-1", "task-1", TaskUpdate(tags=[]))

            mock_reconcile.assert_called_once_with("task-1", [])

    @pytest.mark.asyncio
    async def test_updated_at_never_moves_backwards(self, service, make_task):
        future = datetime(2999, 1, 1)
        task = make_task(updated_at=future)

        with patch.object(service.repo, "get_by_id", AsyncMock(return_value=task)), \
             patch.object(service.repo, "update", AsyncMock(return_value=task)) as mock_update, \
             patch.object(service.repo, "refresh_tags", AsyncMock(return_value=task)):
            await service.update_task("user-1", "task-1", TaskUpdate(is_completed=True))

            assert mock_update.call_args.kwargs["updated_at"] == future
            assert mock_update.call_args.kwargs["is_completed"] is True


class TestTaskServiceList:

    @pytest.mark.asyncio
    async def test_filters_passed_through(self, service):
        with patch.object(service.repo, "list_for_owner", AsyncMock(return_value=[])) as mock_list:
            await service.list_tasks("user-1", priority="high", is_completed=False, tag="work")

            mock_list.assert_called_once_with(
                "user-1", priority="high", is_completed=False, tag="work",
            )

    @pytest.mark.asyncio
    async def test_unknown_priority_rejected(self, service):
        with pytest.raises(ValidationError):
            await service.list_tasks("user-1", priority="urgent")
