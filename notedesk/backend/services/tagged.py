"""
Tagged Entity Service.

Base for services whose entities carry owner-scoped tags. Turns a list of
tag names into tag ids (creating missing tags) and reconciles the
entity's links to exactly those ids.
"""

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from notedesk.backend.core.config import get_app_config
from notedesk.backend.core.utils import unique_tag_names, utc_now
from notedesk.backend.repositories.tag import TagRepository
from notedesk.backend.repositories.tag_association import (
    ReconcileResult,
    TagAssociationRepository,
)
from notedesk.backend.services.base import BaseService


class TaggedEntityService(BaseService):
    """
    Service base for tagged entities.

    Args:
        session: Request-scoped async session
        links: Association repository of the entity type
        atomic_upsert: Tag creation strategy; defaults to the
            tags_atomic_upsert feature flag
    """

    def __init__(
        self,
        session: AsyncSession,
        links: TagAssociationRepository,
        atomic_upsert: bool | None = None,
    ) -> None:
        super().__init__(session)
        app_config = get_app_config()
        if atomic_upsert is None:
            atomic_upsert = app_config.features.tags_atomic_upsert
        self._limits = app_config.application.limits
        self.tag_repo = TagRepository(session, atomic_upsert=atomic_upsert)
        self.links = links

    async def _sync_tags(
        self,
        owner_id: str,
        entity_id: str,
        tag_names: list[str],
    ) -> ReconcileResult:
        """Resolve names to tag ids and reconcile the entity's links to them."""
        tag_ids = await self.tag_repo.resolve_many(owner_id, tag_names)
        result = await self.links.reconcile(entity_id, tag_ids)
        self._log_debug(
            "Tags synced",
            entity_id=entity_id,
            tags=unique_tag_names(tag_names),
            added=result.added,
            removed=result.removed,
        )
        return result

    @staticmethod
    def _bumped_updated_at(current: datetime) -> datetime:
        """updated_at for an edit: now, but never earlier than the stored value."""
        return max(current, utc_now())
