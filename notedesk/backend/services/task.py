"""
Task Service.

Business logic layer for tasks. Tasks are tagged from the same owner
vocabulary as notes and through the same resolve-then-reconcile path;
tag intent follows the note rules (omitted, [] or a list).
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from notedesk.backend.core.exceptions import ValidationError
from notedesk.backend.core.utils import to_utc_naive, unique_tag_names
from notedesk.backend.models.task import TASK_PRIORITIES, Task
from notedesk.backend.repositories.tag_association import TaskTagRepository
from notedesk.backend.repositories.task import TaskRepository
from notedesk.backend.schemas.task import TaskCreate, TaskUpdate
from notedesk.backend.services.tagged import TaggedEntityService

# Fields an update may set to null
CLEARABLE_FIELDS = frozenset({"description", "due_date"})


class TaskService(TaggedEntityService):
    """Service for task business logic, scoped to the calling owner."""

    def __init__(self, session: AsyncSession, atomic_upsert: bool | None = None) -> None:
        super().__init__(session, TaskTagRepository(session), atomic_upsert=atomic_upsert)
        self.repo = TaskRepository(session)

    async def list_tasks(
        self,
        owner_id: str,
        priority: str | None = None,
        is_completed: bool | None = None,
        tag: str | None = None,
    ) -> list[Task]:
        """List the owner's tasks, newest first, optionally filtered."""
        self._require_owner(owner_id)
        if priority is not None and priority not in TASK_PRIORITIES:
            raise ValidationError(
                "Invalid priority",
                details={"priority": f"Expected one of {', '.join(TASK_PRIORITIES)}"},
            )
        return await self._execute_db_operation(
            "list_tasks",
            self.repo.list_for_owner(
                owner_id, priority=priority, is_completed=is_completed, tag=tag,
            ),
        )

    async def get_task(self, owner_id: str, task_id: str) -> Task:
        """
        Get a task by ID.

        Raises:
            NotFoundError: If task not found in the owner's scope
        """
        self._require_owner(owner_id)
        return await self._execute_db_operation(
            "get_task",
            self.repo.get_by_id(owner_id, task_id),
        )

    async def create_task(self, owner_id: str, data: TaskCreate) -> Task:
        """
        Create a task, attaching tags when tag intent was expressed.

        Raises:
            NotAuthenticatedError: If no owner is in scope
            ValidationError: If title, description or the tag list is invalid
            PersistenceError: If the store fails
        """
        self._require_owner(owner_id)
        self._validate_task_fields(
            title=data.title, description=data.description, creating=True,
        )
        if data.tags is not None:
            self._validate_task_tags(data.tags)

        self._log_operation("Creating task", owner_id=owner_id, title=data.title)

        return await self._execute_db_operation(
            "create_task",
            self._create_with_tags(owner_id, data),
        )

    async def update_task(self, owner_id: str, task_id: str, data: TaskUpdate) -> Task:
        """
        Update an existing task.

        Omitted fields are untouched. Null clears description and due_date
        and is ignored for every other field. updated_at is bumped on
        every call.

        Raises:
            NotFoundError: If task not found in the owner's scope
            ValidationError: If a supplied field is invalid
        """
        self._require_owner(owner_id)

        update_data = data.model_dump(exclude_unset=True)
        tags = update_data.pop("tags", None)
        fields = {
            key: value for key, value in update_data.items()
            if value is not None or key in CLEARABLE_FIELDS
        }

        self._validate_task_fields(
            title=fields.get("title"),
            description=fields.get("description"),
        )
        if tags is not None:
            self._validate_task_tags(tags)
        if "due_date" in fields:
            fields["due_date"] = to_utc_naive(fields["due_date"])

        self._log_operation(
            "Updating task",
            task_id=task_id,
            fields=list(fields.keys()),
            tags_changed=tags is not None,
        )

        return await self._execute_db_operation(
            "update_task",
            self._update_with_tags(owner_id, task_id, fields, tags),
        )

    async def delete_task(self, owner_id: str, task_id: str) -> None:
        """
        Delete a task; its tag links go with it, its tags remain.

        Raises:
            NotFoundError: If task not found in the owner's scope
        """
        self._require_owner(owner_id)
        self._log_operation("Deleting task", task_id=task_id)

        await self._execute_db_operation(
            "delete_task",
            self.repo.delete(owner_id, task_id),
        )

    async def _create_with_tags(self, owner_id: str, data: TaskCreate) -> Task:
        task = await self.repo.create(
            owner_id=owner_id,
            title=data.title,
            description=data.description,
            priority=data.priority,
            due_date=to_utc_naive(data.due_date),
        )
        if data.tags is not None:
            await self._sync_tags(owner_id, task.id, data.tags)
        return await self.repo.refresh_tags(task)

    async def _update_with_tags(
        self,
        owner_id: str,
        task_id: str,
        fields: dict[str, Any],
        tags: list[str] | None,
    ) -> Task:
        task = await self.repo.get_by_id(owner_id, task_id)
        fields["updated_at"] = self._bumped_updated_at(task.updated_at)
        task = await self.repo.update(task, **fields)
        if tags is not None:
            await self._sync_tags(owner_id, task.id, tags)
        return await self.repo.refresh_tags(task)

    def _validate_task_fields(
        self,
        title: str | None,
        description: str | None,
        creating: bool = False,
    ) -> None:
        if creating or title is not None:
            self._validate_required({"title": title}, ["title"])
            self._validate_string_length(
                title, "title", max_length=self._limits.max_title_length,
            )
        if description is not None:
            self._validate_string_length(
                description, "description",
                max_length=self._limits.max_description_length,
            )

    def _validate_task_tags(self, names: list[str]) -> None:
        """Validate each name, then the number of distinct names."""
        self._validate_tag_names(names, self._limits.max_tag_length)
        limit = self._limits.max_tags_per_task
        if len(unique_tag_names(names)) > limit:
            raise ValidationError(
                "Too many tags",
                details={"tags": f"A task can have at most {limit} tags"},
            )
