"""
NoteShelf Backend — Notes Route Handlers
==========================================

What:  GET /api/notes (paged list), POST /api/notes (create), GET /api/notes/{id}.
How:   Extracts query/body parameters, delegates to NoteStore, wraps the result
       in the JSON envelope. Domain errors propagate to the handlers in main.py.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.config import settings
from app.schemas.note import (
    ErrorResponse,
    NoteCreate,
    NoteListResponse,
    NoteResponse,
    NoteView,
)
from app.services.note_store import NoteStore, get_note_store
from app.services.pagination import normalize_pagination

router = APIRouter(prefix="/api", tags=["Notes"])


@router.get(
    "/notes",
    response_model=NoteListResponse,
    responses={
        200: {"description": "One page of notes", "model": NoteListResponse},
        500: {"description": "Storage fault", "model": ErrorResponse},
    },
    summary="List notes page by page",
    description="Returns notes ordered by id. `page` is 1-based; `limit` defaults to 10.",
)
async def list_notes(
    page: Optional[int] = Query(default=None, description="1-based page number"),
    limit: Optional[int] = Query(default=None, description="Notes per page"),
    store: NoteStore = Depends(get_note_store),
) -> NoteListResponse:
    limit, offset = normalize_pagination(
        page, limit, default_limit=settings.notes_default_limit
    )
    notes = await store.list_notes(limit=limit, offset=offset)
    views = [NoteView.from_note(note) for note in notes]
    return NoteListResponse(results=len(views), notes=views)


@router.post(
    "/notes",
    status_code=status.HTTP_201_CREATED,
    response_model=NoteResponse,
    responses={
        201: {"description": "Note created", "model": NoteResponse},
        409: {"description": "Title already in use", "model": ErrorResponse},
        500: {"description": "Storage fault", "model": ErrorResponse},
    },
    summary="Create a note",
)
async def create_note(
    payload: NoteCreate,
    store: NoteStore = Depends(get_note_store),
) -> NoteResponse:
    """
    Create a note.

    The response body is built from the row as read back from the database,
    so `published`, `category` and the timestamps are the stored values.
    """
    note = await store.create_note(
        title=payload.title,
        content=payload.content,
        category=payload.category,
    )
    return NoteResponse.for_note(note)


@router.get(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={
        200: {"description": "The note", "model": NoteResponse},
        404: {"description": "Note not found", "model": ErrorResponse},
        500: {"description": "Storage fault", "model": ErrorResponse},
    },
    summary="Get a single note by ID",
)
async def get_note(
    note_id: UUID,
    store: NoteStore = Depends(get_note_store),
) -> NoteResponse:
    note = await store.get_note(note_id)
    return NoteResponse.for_note(note)
