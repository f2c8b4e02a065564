"""
Tag Association Repositories.

Reconciles the tag links of one entity against a desired set of tag ids.
Only the difference is written: links that are already correct are left
alone, so their id and created_at survive any number of reconciliations.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from notedesk.backend.core.logging import get_logger
from notedesk.backend.models.base import Base
from notedesk.backend.models.note import NoteTag
from notedesk.backend.models.task import TaskTag

logger = get_logger(__name__)

AssociationType = TypeVar("AssociationType", bound=Base)


@dataclass(frozen=True)
class ReconcileResult:
    """Number of association rows inserted and deleted by one reconciliation."""

    added: int = 0
    removed: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)


class TagAssociationRepository(Generic[AssociationType]):
    """
    Base repository for an entity-tag association table.

    Subclasses set the association model and the name of its entity
    foreign key column:

        class NoteTagRepository(TagAssociationRepository[NoteTag]):
            model = NoteTag
            entity_key = "note_id"

    The model must also have a `tag_id` column and a unique constraint on
    (entity_key, tag_id).
    """

    model: type[AssociationType]
    entity_key: str

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @property
    def _entity_column(self) -> Any:
        return getattr(self.model, self.entity_key)

    async def get_tag_ids(self, entity_id: str) -> frozenset[str]:
        """Tag ids currently linked to the entity."""
        result = await self.session.execute(
            select(self.model.tag_id).where(self._entity_column == entity_id)
        )
        return frozenset(result.scalars().all())

    async def clear(self, entity_id: str) -> int:
        """Remove every tag link of the entity. Returns the number removed."""
        result = await self.session.execute(
            delete(self.model)
            .where(self._entity_column == entity_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def reconcile(
        self,
        entity_id: str,
        desired_tag_ids: Iterable[str],
    ) -> ReconcileResult:
        """
        Make the entity's tag links equal exactly `desired_tag_ids`.

        An empty desired set clears all links. Otherwise stale links are
        deleted in one statement, then missing links are inserted in one
        statement. Runs inside the caller's transaction.

        Args:
            entity_id: Entity whose links are reconciled
            desired_tag_ids: Target set of tag ids (duplicates are ignored)

        Returns:
            Counts of inserted and deleted links
        """
        desired = frozenset(desired_tag_ids)

        if not desired:
            removed = await self.clear(entity_id)
            logger.debug(
                "Tag links cleared",
                extra={self.entity_key: entity_id, "removed": removed},
            )
            return ReconcileResult(removed=removed)

        current = await self.get_tag_ids(entity_id)
        to_add = desired - current
        to_remove = current - desired

        if to_remove:
            await self.session.execute(
                delete(self.model)
                .where(self._entity_column == entity_id)
                .where(self.model.tag_id.in_(to_remove))
                .execution_options(synchronize_session=False)
            )

        if to_add:
            await self.session.execute(
                insert(self.model),
                [
                    {self.entity_key: entity_id, "tag_id": tag_id}
                    for tag_id in sorted(to_add)
                ],
            )

        logger.debug(
            "Tag links reconciled",
            extra={
                self.entity_key: entity_id,
                "added": len(to_add),
                "removed": len(to_remove),
                "kept": len(current & desired),
            },
        )
        return ReconcileResult(added=len(to_add), removed=len(to_remove))


class NoteTagRepository(TagAssociationRepository[NoteTag]):
    """Tag links of notes."""

    model = NoteTag
    entity_key = "note_id"


class TaskTagRepository(TagAssociationRepository[TaskTag]):
    """Tag links of tasks."""

    model = TaskTag
    entity_key = "task_id"
