"""
NoteShelf Backend — Application Package Initializer
=====================================================

Architecture Note:
    This backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, JSON envelopes
    ├─────────────────────────────────────┤
    │  Services (pagination, NoteStore)   │  ← windowing, queries, error mapping
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │      Database handle (injected)     │  ← engine + session factory
    └─────────────────────────────────────┘
"""

__version__ = "0.1.0"
