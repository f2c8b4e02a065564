"""
Integration Tests for Note Service.

Exercises notes and their tags end to end against a real database.
"""

from datetime import datetime

import pytest
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from notedesk.backend.core.exceptions import NotFoundError
from notedesk.backend.models.note import Note, NoteTag
from notedesk.backend.models.tag import Tag
from notedesk.backend.schemas.note import NoteCreate, NoteUpdate
from notedesk.backend.schemas.tag import TagCreate
from notedesk.backend.services.note import NoteService
from notedesk.backend.services.tag import TagService


@pytest.fixture(params=[True, False], ids=["upsert", "savepoint"])
def service(request, db_session: AsyncSession) -> NoteService:
    return NoteService(db_session, atomic_upsert=request.param)


async def set_updated_at(session: AsyncSession, note_id: str, value: datetime) -> None:
    await session.execute(update(Note).where(Note.id == note_id).values(updated_at=value))


async def count(session: AsyncSession, model) -> int:
    return await session.scalar(select(func.count()).select_from(model))


class TestListOrdering:

    @pytest.mark.asyncio
    async def test_pinned_first_then_most_recent(self, service, db_session, owner_id):
        a = await service.create_note(owner_id, NoteCreate(title="A", is_pinned=True))
        b = await service.create_note(owner_id, NoteCreate(title="B"))
        c = await service.create_note(owner_id, NoteCreate(title="C", is_pinned=True))
        await set_updated_at(db_session, a.id, datetime(2024, 1, 1))
        await set_updated_at(db_session, c.id, datetime(2024, 1, 2))
        await set_updated_at(db_session, b.id, datetime(2024, 1, 3))

        notes = await service.list_notes(owner_id)

        assert [n.title for n in notes] == ["C", "A", "B"]

    @pytest.mark.asyncio
    async def test_list_includes_tags(self, service, owner_id):
        await service.create_note(owner_id, NoteCreate(title="Tagged", tags=["work", "Home"]))

        notes = await service.list_notes(owner_id)

        assert notes[0].tag_names == ["home", "work"]

    @pytest.mark.asyncio
    async def test_list_scoped_to_owner(self, service, owner_id, other_owner_id):
        await service.create_note(owner_id, NoteCreate(title="Mine"))

        assert await service.list_notes(other_owner_id) == []


class TestCreateTags:

    @pytest.mark.asyncio
    async def test_omitted_and_empty_tags_end_in_same_state(self, service, db_session, owner_id):
        omitted = await service.create_note(owner_id, NoteCreate(title="Omitted"))
        empty = await service.create_note(owner_id, NoteCreate(title="Empty", tags=[]))

        assert omitted.tag_names == []
        assert empty.tag_names == []
        assert await count(db_session, NoteTag) == 0
        assert await count(db_session, Tag) == 0

    @pytest.mark.asyncio
    async def test_case_variants_collapse(self, service, db_session, owner_id):
        note = await service.create_note(
            owner_id, NoteCreate(title="Plan", tags=["Work", "work", " WORK ", "home"]),
        )

        assert note.tag_names == ["home", "work"]
        assert await count(db_session, Tag) == 2
        assert await count(db_session, NoteTag) == 2

    @pytest.mark.asyncio
    async def test_existing_tag_casing_is_kept(self, service, db_session, owner_id):
        await TagService(db_session).create_tag(owner_id, TagCreate(name="Work", color="#10B981"))

        note = await service.create_note(owner_id, NoteCreate(title="Plan", tags=["work"]))

        assert note.tag_names == ["Work"]
        assert await count(db_session, Tag) == 1

    @pytest.mark.asyncio
    async def test_tags_are_shared_across_notes(self, service, db_session, owner_id):
        await service.create_note(owner_id, NoteCreate(title="One", tags=["work"]))
        await service.create_note(owner_id, NoteCreate(title="Two", tags=["Work"]))

        assert await count(db_session, Tag) == 1
        assert await count(db_session, NoteTag) == 2


class TestUpdate:

    @pytest.mark.asyncio
    async def test_replaces_tags(self, service, owner_id):
        note = await service.create_note(owner_id, NoteCreate(title="Plan", tags=["a", "b"]))

        note = await service.update_note(owner_id, note.id, NoteUpdate(tags=["b", "c"]))

        assert note.tag_names == ["b", "c"]

    @pytest.mark.asyncio
    async def test_omitted_tags_are_kept(self, service, owner_id):
        note = await service.create_note(owner_id, NoteCreate(title="Plan", tags=["a"]))

        note = await service.update_note(owner_id, note.id, NoteUpdate(title="Renamed"))

        assert note.title == "Renamed"
        assert note.tag_names == ["a"]

    @pytest.mark.asyncio
    async def test_empty_tags_detach_but_keep_tag_rows(self, service, db_session, owner_id):
        note = await service.create_note(owner_id, NoteCreate(title="Plan", tags=["a", "b"]))

        note = await service.update_note(owner_id, note.id, NoteUpdate(tags=[]))

        assert note.tag_names == []
        assert await count(db_session, NoteTag) == 0
        assert await count(db_session, Tag) == 2

    @pytest.mark.asyncio
    async def test_bumps_updated_at_without_field_changes(self, service, db_session, owner_id):
        note = await service.create_note(owner_id, NoteCreate(title="Plan"))
        await set_updated_at(db_session, note.id, datetime(2024, 1, 1))
        await db_session.refresh(note)

        note = await service.update_note(owner_id, note.id, NoteUpdate())

        assert note.updated_at > datetime(2024, 1, 1)

    @pytest.mark.asyncio
    async def test_update_moves_note_to_top(self, service, db_session, owner_id):
        first = await service.create_note(owner_id, NoteCreate(title="First"))
        second = await service.create_note(owner_id, NoteCreate(title="Second"))
        await set_updated_at(db_session, first.id, datetime(2024, 1, 1))
        await set_updated_at(db_session, second.id, datetime(2024, 1, 2))
        await db_session.refresh(first)

        await service.update_note(owner_id, first.id, NoteUpdate(content="edited"))

        notes = await service.list_notes(owner_id)
        assert [n.title for n in notes] == ["First", "Second"]

    @pytest.mark.asyncio
    async def test_other_owner_cannot_update(self, service, owner_id, other_owner_id):
        note = await service.create_note(owner_id, NoteCreate(title="Mine"))

        with pytest.raises(NotFoundError):
            await service.update_note(other_owner_id, note.id, NoteUpdate(title="Theirs"))


class TestDelete:

    @pytest.mark.asyncio
    async def test_cascade_removes_links_and_keeps_tags(self, service, db_session, owner_id):
        note = await service.create_note(owner_id, NoteCreate(title="Plan", tags=["a", "b"]))

        await service.delete_note(owner_id, note.id)

        assert await count(db_session, Note) == 0
        assert await count(db_session, NoteTag) == 0
        assert await count(db_session, Tag) == 2

    @pytest.mark.asyncio
    async def test_other_owner_cannot_delete(self, service, owner_id, other_owner_id):
        note = await service.create_note(owner_id, NoteCreate(title="Mine"))

        with pytest.raises(NotFoundError):
            await service.delete_note(other_owner_id, note.id)

        assert (await service.get_note(owner_id, note.id)).title == "Mine"

    @pytest.mark.asyncio
    async def test_get_after_delete(self, service, owner_id):
        note = await service.create_note(owner_id, NoteCreate(title="Gone"))
        await service.delete_note(owner_id, note.id)

        with pytest.raises(NotFoundError):
            await service.get_note(owner_id, note.id)
