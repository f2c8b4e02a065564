"""
Tag Repository.

Data access for owner-scoped tags, including tag identity resolution:
turning a tag name into a durable tag id, creating the tag on first use.

Concurrent first use of the same name by two requests is expected. The
unique index on (owner_id, lower(name)) lets exactly one insert win; the
loser re-reads the winner's row instead of failing.
"""

from collections.abc import Iterable

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from notedesk.backend.core.config import get_app_config
from notedesk.backend.core.exceptions import PersistenceError
from notedesk.backend.core.logging import get_logger
from notedesk.backend.core.utils import normalize_tag_name, tag_key, unique_tag_names
from notedesk.backend.models.tag import Tag
from notedesk.backend.repositories.base import BaseRepository

logger = get_logger(__name__)

# Dialects with INSERT ... ON CONFLICT DO NOTHING
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class TagRepository(BaseRepository[Tag]):
    """
    Repository for Tag model.

    Args:
        session: Request-scoped async session
        atomic_upsert: Create missing tags with a single conflict-ignoring
            INSERT where the dialect supports it. When False, or on other
            dialects, the insert runs inside a SAVEPOINT and a uniqueness
            violation is caught instead.
        default_color: Color of tags created on first use; defaults to
            application.yaml limits.default_tag_color
    """

    model = Tag

    def __init__(
        self,
        session: AsyncSession,
        atomic_upsert: bool = True,
        default_color: str | None = None,
    ) -> None:
        super().__init__(session)
        self.atomic_upsert = atomic_upsert
        self.default_color = (
            default_color or get_app_config().application.limits.default_tag_color
        )

    async def find_id(self, owner_id: str, name: str) -> str | None:
        """Look up a tag id by case-insensitive name within the owner's scope."""
        result = await self.session.execute(
            select(Tag.id)
            .where(Tag.owner_id == owner_id)
            .where(func.lower(Tag.name) == tag_key(name))
        )
        return result.scalar_one_or_none()

    async def get_by_name(self, owner_id: str, name: str) -> Tag | None:
        """Get a tag by case-insensitive name, or None."""
        result = await self.session.execute(
            select(Tag)
            .where(Tag.owner_id == owner_id)
            .where(func.lower(Tag.name) == tag_key(name))
        )
        return result.scalar_one_or_none()

    async def list_for_owner(self, owner_id: str) -> list[Tag]:
        """All tags of an owner, ordered by name."""
        result = await self.session.execute(
            select(Tag)
            .where(Tag.owner_id == owner_id)
            .order_by(Tag.name)
        )
        return list(result.scalars().all())

    async def resolve(self, owner_id: str, raw_name: str) -> str:
        """
        Return the id of the owner's tag with this name, creating it if absent.

        An existing tag is returned as is; its casing and color are never
        touched. A new tag is stored under the lowercase name with the
        default color.

        Raises:
            PersistenceError: If the tag can be neither created nor found
        """
        name = normalize_tag_name(raw_name)

        tag_id = await self.find_id(owner_id, name)
        if tag_id is not None:
            return tag_id

        dialect = self.session.get_bind().dialect.name
        upsert_insert = _UPSERT_INSERTS.get(dialect) if self.atomic_upsert else None

        if upsert_insert is not None:
            result = await self.session.execute(
                upsert_insert(Tag.__table__)
                .values(owner_id=owner_id, name=name.lower(), color=self.default_color)
                .on_conflict_do_nothing()
            )
            if result.rowcount == 0:
                logger.info(
                    "Tag created concurrently, re-reading",
                    extra={"owner_id": owner_id, "tag": name},
                )
        else:
            tag = Tag(owner_id=owner_id, name=name.lower(), color=self.default_color)
            try:
                async with self.session.begin_nested():
                    self.session.add(tag)
            except IntegrityError:
                logger.info(
                    "Tag created concurrently, re-reading",
                    extra={"owner_id": owner_id, "tag": name},
                )
            else:
                logger.debug("Tag created", extra={"owner_id": owner_id, "tag_id": tag.id})
                return tag.id

        tag_id = await self.find_id(owner_id, name)
        if tag_id is None:
            raise PersistenceError(f"Tag '{name}' could not be resolved")
        return tag_id

    async def resolve_many(self, owner_id: str, raw_names: Iterable[str]) -> list[str]:
        """
        Resolve several names, in order, collapsing case-insensitive duplicates.

        Returns:
            Tag ids, one per distinct name
        """
        return [
            await self.resolve(owner_id, name)
            for name in unique_tag_names(raw_names)
        ]
