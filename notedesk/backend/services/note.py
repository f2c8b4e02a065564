"""
Note Service.

Business logic layer for notes. Composes the note repository with tag
resolution and tag-link reconciliation to produce notes with their tags.

Tag intent on create and update is tri-state (see schemas.note): an
omitted or null `tags` never touches the links, an empty list detaches
every tag, and a non-empty list makes the links exactly that set.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from notedesk.backend.models.note import Note
from notedesk.backend.repositories.note import NoteRepository
from notedesk.backend.repositories.tag_association import NoteTagRepository
from notedesk.backend.schemas.note import NoteCreate, NoteUpdate
from notedesk.backend.services.tagged import TaggedEntityService


class NoteService(TaggedEntityService):
    """
    Service for note business logic.

    Every method takes the owner id of the authenticated caller and
    operates only on that owner's notes and tags.
    """

    def __init__(self, session: AsyncSession, atomic_upsert: bool | None = None) -> None:
        super().__init__(session, NoteTagRepository(session), atomic_upsert=atomic_upsert)
        self.repo = NoteRepository(session)

    async def list_notes(self, owner_id: str) -> list[Note]:
        """
        List the owner's notes, pinned first, then most recently updated.

        Returns:
            Notes with their tags
        """
        self._require_owner(owner_id)
        return await self._execute_db_operation(
            "list_notes",
            self.repo.list_for_owner(owner_id),
        )

    async def get_note(self, owner_id: str, note_id: str) -> Note:
        """
        Get a note by ID.

        Raises:
            NotFoundError: If note not found in the owner's scope
        """
        self._require_owner(owner_id)
        return await self._execute_db_operation(
            "get_note",
            self.repo.get_by_id(owner_id, note_id),
        )

    async def create_note(self, owner_id: str, data: NoteCreate) -> Note:
        """
        Create a new note, attaching tags when tag intent was expressed.

        Args:
            owner_id: Owner of the new note
            data: Note creation data

        Returns:
            Created note with its tags

        Raises:
            NotAuthenticatedError: If no owner is in scope
            ValidationError: If title, content or any tag name is invalid
            PersistenceError: If the store fails
        """
        self._require_owner(owner_id)
        self._validate_note_fields(title=data.title, content=data.content, creating=True)
        if data.tags is not None:
            self._validate_tag_names(data.tags, self._limits.max_tag_length)

        self._log_operation("Creating note", owner_id=owner_id, title=data.title)

        note = await self._execute_db_operation(
            "create_note",
            self._create_with_tags(owner_id, data),
        )

        self._log_debug("Note created", note_id=note.id, tags=note.tag_names)
        return note

    async def update_note(self, owner_id: str, note_id: str, data: NoteUpdate) -> Note:
        """
        Update an existing note.

        Only fields present in `data` (and not null) are changed.
        updated_at is bumped on every call and never moves backwards.

        Args:
            owner_id: Owner of the note
            note_id: Note ID to update
            data: Update data

        Returns:
            Updated note with its tags

        Raises:
            NotFoundError: If note not found in the owner's scope
            ValidationError: If a supplied field is invalid
        """
        self._require_owner(owner_id)

        update_data = data.model_dump(exclude_unset=True)
        tags = update_data.pop("tags", None)
        fields = {key: value for key, value in update_data.items() if value is not None}

        self._validate_note_fields(
            title=fields.get("title"),
            content=fields.get("content"),
        )
        if tags is not None:
            self._validate_tag_names(tags, self._limits.max_tag_length)

        self._log_operation(
            "Updating note",
            note_id=note_id,
            fields=list(fields.keys()),
            tags_changed=tags is not None,
        )

        return await self._execute_db_operation(
            "update_note",
            self._update_with_tags(owner_id, note_id, fields, tags),
        )

    async def delete_note(self, owner_id: str, note_id: str) -> None:
        """
        Delete a note. Its tag links are removed by the storage cascade;
        the tags themselves remain.

        Raises:
            NotFoundError: If note not found in the owner's scope
        """
        self._require_owner(owner_id)
        self._log_operation("Deleting note", note_id=note_id)

        await self._execute_db_operation(
            "delete_note",
            self.repo.delete(owner_id, note_id),
        )

    async def _create_with_tags(self, owner_id: str, data: NoteCreate) -> Note:
        note = await self.repo.create(
            owner_id=owner_id,
            title=data.title,
            content=data.content,
            is_pinned=data.is_pinned,
        )
        if data.tags is not None:
            await self._sync_tags(owner_id, note.id, data.tags)
        return await self.repo.refresh_tags(note)

    async def _update_with_tags(
        self,
        owner_id: str,
        note_id: str,
        fields: dict,
        tags: list[str] | None,
    ) -> Note:
        note = await self.repo.get_by_id(owner_id, note_id)
        fields["updated_at"] = self._bumped_updated_at(note.updated_at)
        note = await self.repo.update(note, **fields)
        if tags is not None:
            await self._sync_tags(owner_id, note.id, tags)
        return await self.repo.refresh_tags(note)

    def _validate_note_fields(
        self,
        title: str | None,
        content: str | None,
        creating: bool = False,
    ) -> None:
        """Validate title and content; on create the title is required."""
        if creating or title is not None:
            self._validate_required({"title": title}, ["title"])
            self._validate_string_length(
                title, "title", max_length=self._limits.max_title_length,
            )
        if content is not None:
            self._validate_string_length(
                content, "content", max_length=self._limits.max_content_length,
            )
