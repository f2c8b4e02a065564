"""
Tag Service.

Business logic for the owner's tag vocabulary: listing tags and creating
them explicitly with a chosen color. Tags created implicitly by note
tagging go through TagRepository.resolve instead.
"""

import re

from sqlalchemy.ext.asyncio import AsyncSession

from notedesk.backend.core.config import get_app_config
from notedesk.backend.core.exceptions import ConflictError, ValidationError
from notedesk.backend.core.utils import normalize_tag_name
from notedesk.backend.models.tag import Tag
from notedesk.backend.repositories.tag import TagRepository
from notedesk.backend.schemas.tag import TagCreate
from notedesk.backend.services.base import BaseService

COLOR_PATTERN = re.compile(r"#[0-9A-Fa-f]{6}")


class TagService(BaseService):
    """Service for explicit tag management."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self._limits = get_app_config().application.limits
        self.repo = TagRepository(session)

    async def list_tags(self, owner_id: str) -> list[Tag]:
        """List the owner's tags ordered by name."""
        self._require_owner(owner_id)
        return await self._execute_db_operation(
            "list_tags",
            self.repo.list_for_owner(owner_id),
        )

    async def create_tag(self, owner_id: str, data: TagCreate) -> Tag:
        """
        Create a tag with its display casing and color.

        Raises:
            ValidationError: If the name or color is malformed
            ConflictError: If the owner already has a tag with this name,
                ignoring case
        """
        self._require_owner(owner_id)
        self._validate_tag_names([data.name], self._limits.max_tag_length)

        color = data.color or self.repo.default_color
        if not COLOR_PATTERN.fullmatch(color):
            raise ValidationError(
                "Invalid color format",
                details={"color": "Expected #RRGGBB"},
            )

        name = normalize_tag_name(data.name)
        self._log_operation("Creating tag", owner_id=owner_id, tag=name)

        return await self._execute_db_operation(
            "create_tag",
            self._create_unique(owner_id, name, color),
            conflict_message=f"Tag '{name}' already exists",
        )

    async def _create_unique(self, owner_id: str, name: str, color: str) -> Tag:
        existing = await self.repo.get_by_name(owner_id, name)
        if existing is not None:
            raise ConflictError(f"Tag '{existing.name}' already exists")
        return await self.repo.create(owner_id=owner_id, name=name, color=color)
