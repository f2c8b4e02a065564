"""
Tag Model.

Owner-scoped, reusable tag vocabulary. A tag outlives every entity it is
attached to; detaching never deletes the tag row.
"""

from sqlalchemy import Index, String, func
from sqlalchemy.orm import Mapped, mapped_column

from notedesk.backend.models.base import Base, CreatedAtMixin, UUIDMixin


class Tag(UUIDMixin, CreatedAtMixin, Base):
    """
    Tag database model.

    Identity is (owner_id, lower(name)); see the unique index below.
    """

    __tablename__ = "tags"

    owner_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )
    color: Mapped[str] = mapped_column(
        String(7),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name={self.name!r})>"


Index(
    "uq_tags_owner_id_lower_name",
    Tag.owner_id,
    func.lower(Tag.name),
    unique=True,
)
