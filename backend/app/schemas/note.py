"""
NoteShelf Backend — Pydantic Request/Response Schemas
=======================================================

What:  Pydantic models defining the API contract.
Why:   Strict input validation, automatic serialization, and OpenAPI doc generation.
How:   FastAPI validates request bodies against NoteCreate and serializes
       the envelope models below (by alias, so createdAt/updatedAt are camelCase).

Design Decision:
    Schemas are separate from SQLAlchemy models so the outward shape
    (NoteView) can differ from the table layout: `published` is derived
    from the stored flag and timestamps are renamed.
"""

import uuid
from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """Body of POST /api/notes."""
    title: str = Field(min_length=1, description="Note title (must be unique)")
    content: str = Field(description="Free-form note body")
    category: Optional[str] = Field(
        default=None,
        description="Optional category; stored as an empty string when omitted",
    )


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteView(BaseModel):
    """
    What:  Outward-facing projection of a stored note.

    Every field is required. The store guarantees category and both
    timestamps at write time, so a row missing one of them is a bug and
    fails validation here instead of rendering a null.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: uuid.UUID
    title: str
    content: str
    category: str
    published: bool
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @classmethod
    def from_note(cls, note: Any) -> "NoteView":
        """Shape an ORM row; any non-zero stored flag means published."""
        return cls(
            id=note.id,
            title=note.title,
            content=note.content,
            category=note.category,
            published=bool(note.published),
            created_at=note.created_at,
            updated_at=note.updated_at,
        )


class NoteListResponse(BaseModel):
    """Envelope for GET /api/notes."""
    status: Literal["success"] = "success"
    results: int = Field(description="Number of notes in this page")
    notes: List[NoteView]


class NoteData(BaseModel):
    note: NoteView


class NoteResponse(BaseModel):
    """Envelope for POST /api/notes and GET /api/notes/{id}."""
    status: Literal["success"] = "success"
    data: NoteData

    @classmethod
    def for_note(cls, note: Any) -> "NoteResponse":
        return cls(data=NoteData(note=NoteView.from_note(note)))


# ══════════════════════════════════════════════════════════════════════════
# Error / Misc Response Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Error envelope shared by all endpoints.

    status:  always "fail", for client errors (404, 409, 422) and
             server faults (500, 503) alike
    """
    status: Literal["fail"] = Field(default="fail", description="Always fail")
    message: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    status: str
    message: str
