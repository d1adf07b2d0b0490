"""
NoteShelf Backend — Custom Exception Hierarchy
================================================

What:  Application-specific exceptions for the note-access layer.
Why:   The boundary layer must tell a title conflict apart from a generic
       storage fault, and neither should leak raw SQLAlchemy exceptions.
How:   Each exception carries a message and optional context dict.
       Global exception handlers (registered in main.py) map them to
       JSON envelopes with the correct HTTP status codes.
Who:   Raised by NoteStore; caught by the handlers in main.py.

Exception Hierarchy:
    NoteShelfError (base)
    ├── DuplicateTitleError  → 409 Conflict
    ├── NotFoundError        → 404 Not Found
    └── StorageError         → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class NoteShelfError(Exception):
    """
    Base exception for all NoteShelf application errors.

    Attributes:
        message:  Human-readable error description
        context:  Additional debug info (logged, not returned to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class DuplicateTitleError(NoteShelfError):
    """
    Raised when a new note's title collides with an existing note.

    Recoverable and user-correctable: the client picks another title.
    The existing row is never touched.
    """

    def __init__(
        self,
        title: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if title is not None:
            ctx["title"] = title
        super().__init__(message="Note with that title already exists", context=ctx)
        self.title = title


class NotFoundError(NoteShelfError):
    """Raised when a note lookup by identity finds no row."""

    def __init__(
        self,
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = "The requested note was not found"
        if resource_id:
            message = f"Note with ID: {resource_id} not found"
        ctx = context or {}
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource_id = resource_id


class StorageError(NoteShelfError):
    """
    Wraps any lower-level storage fault.

    What:    Connectivity loss, constraint violations other than the title
             uniqueness, serialization faults, a missing post-insert row.
    HTTP:    500 Internal Server Error

    The `cause` is rendered in the response body for diagnostics.
    """

    def __init__(
        self,
        cause: str = "unknown storage failure",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=f"Database error: {cause}", context=context)
        self.cause = cause
