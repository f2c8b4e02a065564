"""
Note Repository.

Data access layer for notes. Handles all database operations
for the Note model.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from notedesk.backend.models.note import Note
from notedesk.backend.repositories.base import BaseRepository


class NoteRepository(BaseRepository[Note]):
    """
    Repository for Note model.

    Inherits owner-scoped CRUD operations from BaseRepository
    and adds note-specific queries.
    """

    model = Note

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def list_for_owner(self, owner_id: str) -> list[Note]:
        """
        Get all notes of an owner, pinned first, then most recently updated.

        Tags are reloaded from the association table even for notes
        already present in the session.

        Args:
            owner_id: Owner whose notes are listed

        Returns:
            Ordered list of notes with their tags loaded
        """
        result = await self.session.execute(
            select(Note)
            .where(Note.owner_id == owner_id)
            .order_by(Note.is_pinned.desc(), Note.updated_at.desc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def refresh_tags(self, note: Note) -> Note:
        """Reload the derived tag list after its links changed."""
        await self.session.refresh(note, attribute_names=["tags"])
        return note
