"""
Task Model.

Database models for tasks and their tag associations. Tasks share the
owner's tag vocabulary with notes.
"""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from notedesk.backend.models.base import Base, CreatedAtMixin, TimestampMixin, UUIDMixin
from notedesk.backend.models.tag import Tag

TASK_PRIORITIES = ("high", "medium", "low")


class TaskTag(UUIDMixin, CreatedAtMixin, Base):
    """Task-tag association row, written only by the tag reconciler."""

    __tablename__ = "task_tags"
    __table_args__ = (
        UniqueConstraint("task_id", "tag_id", name="uq_task_tags_task_id_tag_id"),
    )

    task_id: Mapped[str] = mapped_column(
        ForeignKey("tasks.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tag_id: Mapped[str] = mapped_column(
        ForeignKey("tags.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<TaskTag(task_id={self.task_id}, tag_id={self.tag_id})>"


class Task(UUIDMixin, TimestampMixin, Base):
    """Task database model. `tags` is read-only, like Note.tags."""

    __tablename__ = "tasks"
    __table_args__ = (
        CheckConstraint(
            "priority IN ('high', 'medium', 'low')",
            name="ck_tasks_priority",
        ),
    )

    owner_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    priority: Mapped[str] = mapped_column(
        String(10),
        default="medium",
        nullable=False,
    )
    is_completed: Mapped[bool] = mapped_column(
        default=False,
        nullable=False,
    )
    due_date: Mapped[datetime | None] = mapped_column(
        DateTime,
        nullable=True,
    )

    tags: Mapped[list[Tag]] = relationship(
        secondary="task_tags",
        viewonly=True,
        lazy="selectin",
        order_by=Tag.name,
    )

    @property
    def tag_names(self) -> list[str]:
        """Names of the attached tags, alphabetical."""
        return [tag.name for tag in self.tags]

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, title={self.title!r}, priority={self.priority})>"
