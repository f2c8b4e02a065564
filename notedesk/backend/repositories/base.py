"""
Base Repository.

Base class for owner-scoped repositories with common CRUD operations.
Every lookup is filtered by owner_id, so a row owned by someone else
behaves exactly like a missing row.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from notedesk.backend.core.exceptions import NotFoundError
from notedesk.backend.core.logging import get_logger
from notedesk.backend.models.base import Base

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with common owner-scoped CRUD operations.

    Subclasses should set the model class, which must have `id` and
    `owner_id` columns:

        class NoteRepository(BaseRepository[Note]):
            model = Note
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, owner_id: str, id: str) -> ModelType:
        """
        Get a single record by ID within the owner's scope.

        Raises:
            NotFoundError: If record not found
        """
        instance = await self.get_by_id_or_none(owner_id, id)

        if instance is None:
            raise NotFoundError(f"{self.model.__name__} not found")

        return instance

    async def get_by_id_or_none(self, owner_id: str, id: str) -> ModelType | None:
        """Get a single record by ID, returning None if not found."""
        result = await self.session.execute(
            select(self.model)
            .where(self.model.id == id)
            .where(self.model.owner_id == owner_id)
        )
        return result.scalar_one_or_none()

    async def create(self, **kwargs: Any) -> ModelType:
        """Create a new record."""
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def update(self, instance: ModelType, **kwargs: Any) -> ModelType:
        """Apply field changes to a loaded record and flush them."""
        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)

        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def delete(self, owner_id: str, id: str) -> None:
        """
        Delete a record by ID with a single DELETE statement.

        Dependent rows are removed by the database's ON DELETE CASCADE.

        Raises:
            NotFoundError: If record not found
        """
        result = await self.session.execute(
            delete(self.model)
            .where(self.model.id == id)
            .where(self.model.owner_id == owner_id)
        )
        if result.rowcount == 0:
            raise NotFoundError(f"{self.model.__name__} not found")
