"""
NoteShelf Backend — Note Store
================================

What:  Owns all access to the `notes` table: insert, lookup by id, ordered paged scan.
Why:   Keeps SQL and driver error handling out of the route handlers, and turns
       storage failures into the domain errors the boundary layer understands.
How:   Every operation borrows one session from the injected `Database` handle
       (`async with database.session()`), so the pooled connection is released
       whether the operation succeeds or fails.
Who:   Called by the note route handlers through the `get_note_store` dependency.

Create Flow:
    generate UUID4 → INSERT (published=false, defaults from the DB) → COMMIT
    → SELECT by id (refreshing every column) → return the populated row

Error Mapping:
    IntegrityError on uq_notes_title  → DuplicateTitleError
    any other SQLAlchemyError         → StorageError
    driver OverflowError/ValueError   → StorageError
    row missing after insert          → StorageError
    row missing on lookup             → NotFoundError

No locking happens here. Concurrent creates with the same title are
arbitrated by the unique constraint inside the database.
"""

import logging
import uuid
from typing import List, Optional

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import Database, get_database
from app.exceptions import DuplicateTitleError, NotFoundError, StorageError
from app.models.note import Note

logger = logging.getLogger(__name__)

# Markers identifying the title constraint in driver messages:
#   PostgreSQL: duplicate key value violates unique constraint "uq_notes_title"
#   MySQL:      Duplicate entry 'x' for key 'notes.uq_notes_title'
#   SQLite:     UNIQUE constraint failed: notes.title
_TITLE_CONFLICT_MARKERS = ("uq_notes_title", "notes.title")

# Drivers reject out-of-range bind values (e.g. a limit past 64 bits) with
# plain Python errors that SQLAlchemy does not wrap
_STORAGE_FAULTS = (SQLAlchemyError, OverflowError, ValueError)


def is_title_conflict(exc: IntegrityError) -> bool:
    """True if the integrity error was raised by the title uniqueness constraint."""
    detail = str(exc.orig if exc.orig is not None else exc)
    return any(marker in detail for marker in _TITLE_CONFLICT_MARKERS)


class NoteStore:
    """
    Data access for notes.

    Holds nothing but the database handle; all state lives in the table.
    """

    def __init__(self, database: Database) -> None:
        self.database = database

    async def list_notes(self, limit: int, offset: int) -> List[Note]:
        """
        Return up to `limit` notes after skipping `offset`, ordered by ascending id.

        An empty page is a normal result.

        Raises:
            StorageError: the query failed
        """
        query = select(Note).order_by(Note.id.asc()).limit(limit).offset(offset)
        try:
            async with self.database.session() as session:
                result = await session.execute(query)
                return list(result.scalars().all())
        except _STORAGE_FAULTS as e:
            logger.error("Database error listing notes: %s", e, exc_info=True)
            raise StorageError(
                cause=str(e),
                context={"limit": limit, "offset": offset},
            ) from e

    async def get_note(self, note_id: uuid.UUID) -> Note:
        """
        Fetch a single note by id.

        Raises:
            NotFoundError: no note has this id
            StorageError:  the query failed
        """
        try:
            async with self.database.session() as session:
                note = await self._fetch(session, note_id)
        except _STORAGE_FAULTS as e:
            logger.error("Database error fetching note %s: %s", note_id, e, exc_info=True)
            raise StorageError(cause=str(e), context={"note_id": str(note_id)}) from e

        if note is None:
            raise NotFoundError(resource_id=str(note_id))
        return note

    async def create_note(
        self,
        title: str,
        content: str,
        category: Optional[str] = None,
    ) -> Note:
        """
        Insert a new note and return it as stored.

        The returned row comes from a read-back after commit, so published,
        category and both timestamps reflect what the database assigned.

        Args:
            title:    must not match an existing note's title
            content:  note body
            category: optional; None is stored as ""

        Raises:
            DuplicateTitleError: a note with this title already exists
            StorageError:        insert or read-back failed
        """
        note_id = uuid.uuid4()
        try:
            async with self.database.session() as session:
                session.add(
                    Note(
                        id=note_id,
                        title=title,
                        content=content,
                        category=category if category is not None else "",
                        published=False,
                    )
                )
                await session.commit()
                note = await self._fetch(session, note_id)
        except IntegrityError as e:
            if is_title_conflict(e):
                logger.warning("Rejected note with duplicate title: %r", title)
                raise DuplicateTitleError(title=title) from e
            logger.error("Integrity error inserting note: %s", e, exc_info=True)
            raise StorageError(cause=str(e), context={"note_id": str(note_id)}) from e
        except _STORAGE_FAULTS as e:
            logger.error("Database error inserting note: %s", e, exc_info=True)
            raise StorageError(cause=str(e), context={"note_id": str(note_id)}) from e

        if note is None:
            # The insert committed but the row is not visible to our own read
            logger.error("Note %s missing on read-back after insert", note_id)
            raise StorageError(
                cause=f"note {note_id} not found after insert",
                context={"note_id": str(note_id)},
            )

        logger.info("Note created: %s", note_id)
        return note

    @staticmethod
    async def _fetch(session: AsyncSession, note_id: uuid.UUID) -> Optional[Note]:
        # populate_existing: overwrite identity-map state with what the DB holds,
        # which is how server-assigned defaults become visible after an insert
        result = await session.execute(
            select(Note)
            .where(Note.id == note_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()


def get_note_store(database: Database = Depends(get_database)) -> NoteStore:
    """FastAPI dependency: a NoteStore bound to the application's database handle."""
    return NoteStore(database)
