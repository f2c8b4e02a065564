"""
Task Repository.

Data access layer for tasks.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from notedesk.backend.core.utils import tag_key
from notedesk.backend.models.tag import Tag
from notedesk.backend.models.task import Task, TaskTag
from notedesk.backend.repositories.base import BaseRepository


class TaskRepository(BaseRepository[Task]):
    """Repository for Task model."""

    model = Task

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def list_for_owner(
        self,
        owner_id: str,
        priority: str | None = None,
        is_completed: bool | None = None,
        tag: str | None = None,
    ) -> list[Task]:
        """
        Get an owner's tasks, newest first.

        Args:
            owner_id: Owner whose tasks are listed
            priority: Only tasks with this priority
            is_completed: Only completed (True) or pending (False) tasks
            tag: Only tasks carrying this tag, matched ignoring case

        Returns:
            Tasks with their tags loaded
        """
        query = select(Task).where(Task.owner_id == owner_id)

        if priority is not None:
            query = query.where(Task.priority == priority)
        if is_completed is not None:
            query = query.where(Task.is_completed == is_completed)
        if tag is not None:
            tagged = (
                select(TaskTag.task_id)
                .join(Tag, Tag.id == TaskTag.tag_id)
                .where(Tag.owner_id == owner_id)
                .where(func.lower(Tag.name) == tag_key(tag))
            )
            query = query.where(Task.id.in_(tagged))

        result = await self.session.execute(
            query
            .order_by(Task.created_at.desc(), Task.id)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def refresh_tags(self, task: Task) -> Task:
        """Reload the derived tag list after its links changed."""
        await self.session.refresh(task, attribute_names=["tags"])
        return task
