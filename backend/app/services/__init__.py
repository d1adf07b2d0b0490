# Services package init
"""
NoteShelf Backend — Services Layer
====================================

Sits between routes (HTTP) and the database.

Service Inventory:
    - pagination.normalize_pagination: page/limit → (limit, offset)
    - note_store.NoteStore:            insert, lookup, paged scan; error mapping
"""
