"""
Task Schemas.

Pydantic schemas for task API request/response validation. `tags`
follows the same omitted / [] / list rules as notes (see schemas.note).
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Priority = Literal["high", "medium", "low"]


class TaskCreate(BaseModel):
    """Schema for creating a new task."""

    title: str = Field(
        ...,
        description="Task title",
        examples=["Draft quarterly report"],
    )
    description: str | None = Field(
        default=None,
        description="Optional details",
    )
    priority: Priority = Field(
        default="medium",
        description="Task priority",
    )
    due_date: datetime | None = Field(
        default=None,
        description="Optional due date",
    )
    tags: list[str] | None = Field(
        default=None,
        description="Tag names; omit to create the task without tags",
        examples=[["work"]],
    )


class TaskUpdate(BaseModel):
    """
    Schema for updating a task. Only provided fields change.

    Sending `description` or `due_date` as null clears it.
    """

    title: str | None = Field(default=None, description="Task title")
    description: str | None = Field(default=None, description="Details; null clears")
    priority: Priority | None = Field(default=None, description="Task priority")
    is_completed: bool | None = Field(default=None, description="Completion status")
    due_date: datetime | None = Field(default=None, description="Due date; null clears")
    tags: list[str] | None = Field(
        default=None,
        description="Full desired tag list; [] detaches all, omit to leave unchanged",
    )


class TaskResponse(BaseModel):
    """Schema for task in API responses."""

    id: str = Field(description="Task unique identifier")
    title: str = Field(description="Task title")
    description: str | None = Field(description="Task details")
    priority: Priority = Field(description="Task priority")
    is_completed: bool = Field(description="Whether the task is done")
    due_date: datetime | None = Field(description="Due date")
    tags: list[str] = Field(
        validation_alias="tag_names",
        description="Attached tag names, alphabetical",
    )
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)
