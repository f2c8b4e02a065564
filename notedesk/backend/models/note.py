"""
Note Model.

Database models for notes and their tag associations.
"""

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from notedesk.backend.models.base import Base, CreatedAtMixin, TimestampMixin, UUIDMixin
from notedesk.backend.models.tag import Tag


class NoteTag(UUIDMixin, CreatedAtMixin, Base):
    """
    Note-tag association row.

    Written only by the tag reconciler. Both foreign keys cascade, so
    deleting a note (or a tag) removes its links at the storage layer.
    """

    __tablename__ = "note_tags"
    __table_args__ = (
        UniqueConstraint("note_id", "tag_id", name="uq_note_tags_note_id_tag_id"),
    )

    note_id: Mapped[str] = mapped_column(
        ForeignKey("notes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tag_id: Mapped[str] = mapped_column(
        ForeignKey("tags.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<NoteTag(note_id={self.note_id}, tag_id={self.tag_id})>"


class Note(UUIDMixin, TimestampMixin, Base):
    """
    Note database model.

    `tags` is read-only and always loaded from note_tags; it is never
    written through the ORM.
    """

    __tablename__ = "notes"

    owner_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(
        Text,
        default="",
        nullable=False,
    )
    is_pinned: Mapped[bool] = mapped_column(
        default=False,
        nullable=False,
    )

    tags: Mapped[list[Tag]] = relationship(
        secondary="note_tags",
        viewonly=True,
        lazy="selectin",
        order_by=Tag.name,
    )

    @property
    def tag_names(self) -> list[str]:
        """Names of the attached tags, alphabetical."""
        return [tag.name for tag in self.tags]

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r})>"
