"""
NoteShelf Backend — Note SQLAlchemy Model
===========================================

What:  ORM model representing the `notes` table.
Why:   Maps Python objects to database rows for type-safe database operations.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Used by NoteStore for inserts and selects.

Table Design Rationale:
    - UUID primary key generated by the store; also the list order key
    - title: unique (uq_notes_title) so duplicate creates fail atomically in the DB
    - category: NOT NULL with '' default so the API never renders null
    - published, created_at, updated_at: storage-engine defaults, read back after insert
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Text, UniqueConstraint, Uuid, false, func, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Note(Base):
    """
    A note record.

    Lifecycle:
        Created by NoteStore.create_note (id from the store, defaults from the DB).
        Never updated or deleted by this service.
    """

    __tablename__ = "notes"

    # Generic Uuid: native uuid on PostgreSQL, CHAR(32) elsewhere.
    # Both orderings agree with uuid.UUID ordering.
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    category: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        server_default=text("''"),
    )

    published: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        server_default=false(),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    __table_args__ = (
        UniqueConstraint("title", name="uq_notes_title"),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title='{self.title}')>"
