"""
Note Schemas.

Pydantic schemas for note API request/response validation.

`tags` is tri-state on both create and update:
    omitted or null  - no tag intent, links are not touched
    []               - detach every tag
    ["a", "b"]       - links become exactly these tags
Length and character rules are enforced by NoteService before any write.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class NoteCreate(BaseModel):
    """Schema for creating a new note."""

    title: str = Field(
        ...,
        description="Note title",
        examples=["Weekly review"],
    )
    content: str = Field(
        default="",
        description="Note content (markdown)",
        examples=["- inbox zero\n- plan next week"],
    )
    is_pinned: bool = Field(
        default=False,
        description="Pinned notes are listed first",
    )
    tags: list[str] | None = Field(
        default=None,
        description="Tag names; omit to create the note without tags",
        examples=[["work", "planning"]],
    )


class NoteUpdate(BaseModel):
    """Schema for updating an existing note. Only provided fields change."""

    title: str | None = Field(
        default=None,
        description="Note title",
    )
    content: str | None = Field(
        default=None,
        description="Note content",
    )
    is_pinned: bool | None = Field(
        default=None,
        description="Pin status",
    )
    tags: list[str] | None = Field(
        default=None,
        description="Full desired tag list; [] detaches all, omit to leave unchanged",
    )


class NoteResponse(BaseModel):
    """Schema for note in API responses."""

    id: str = Field(description="Note unique identifier")
    title: str = Field(description="Note title")
    content: str = Field(description="Note content")
    is_pinned: bool = Field(description="Whether the note is pinned")
    tags: list[str] = Field(
        validation_alias="tag_names",
        description="Attached tag names, alphabetical",
    )
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)
