"""
Tag Schemas.

Pydantic schemas for tag API request/response validation.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class TagCreate(BaseModel):
    """Schema for creating a tag explicitly."""

    name: str = Field(
        ...,
        description="Tag name, unique per owner ignoring case",
        examples=["Work"],
    )
    color: str | None = Field(
        default=None,
        description="Display color as #RRGGBB; defaults to the configured tag color",
        examples=["#10B981"],
    )


class TagResponse(BaseModel):
    """Schema for tag in API responses."""

    id: str = Field(description="Tag unique identifier")
    name: str = Field(description="Tag name")
    color: str = Field(description="Display color")
    created_at: datetime = Field(description="Creation timestamp")

    model_config = ConfigDict(from_attributes=True)
